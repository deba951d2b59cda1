import pytest
from pydantic import ValidationError

from migration_console.error_handler import ConfigurationError
from migration_console.utils.config_loader import (
    DEFAULT_DOCUMENTS_SEARCH_PATH,
    DocumentApiConfig,
    load_console_config,
)

from tests.conftest import DOCUMENT_BASE_URL, DOCUMENTS_SEARCH_URL, POLICY_BASE_URL, POLICY_SEARCH_URL


def test_defaults_from_empty_environment():
    config = load_console_config({})

    assert config.auth.api_version == "1"
    assert config.documents.search_path == DEFAULT_DOCUMENTS_SEARCH_PATH
    assert config.documents.search_api_version == "2"
    assert config.documents.download_api_version == "1"
    assert config.documents.impersonate_header == "ImpersonateId"
    assert config.documents.impersonate_id == ""
    assert config.policies.api_version == "2"
    assert config.policies.language == "en"
    assert config.timeout_seconds == 30
    assert config.cors_allow_origins == ["*"]
    assert config.documents.resolve_search_url() is None


def test_full_environment(console_config):
    credential = console_config.auth.credential()

    assert credential.app_id == "console-app"
    assert credential.auth_headers()["App_Key"] == "s3cret"
    assert console_config.documents.resolve_search_url() == DOCUMENTS_SEARCH_URL
    assert console_config.policies.search_url() == POLICY_SEARCH_URL


def test_credential_lists_missing_variables():
    config = load_console_config({"UAT_AUTH_URL": "https://auth.example.test", "UAT_AUTH_APP_KEY": "  "})

    with pytest.raises(ConfigurationError) as info:
        config.auth.credential()

    message = info.value.message
    assert "UAT_AUTH_RESOURCE" in message
    assert "UAT_AUTH_APP_ID" in message
    assert "UAT_AUTH_APP_KEY" in message
    assert "UAT_AUTH_URL" not in message
    assert info.value.status_code == 500


def test_policy_search_url_requires_base():
    with pytest.raises(ConfigurationError):
        load_console_config({}).policies.search_url()


def test_per_route_impersonation_overrides_shared_value(uat_env):
    uat_env["UAT_POLICY_DOCUMENTS_IMPERSONATE_ID"] = "docs@example.test"
    config = load_console_config(uat_env)

    assert config.documents.impersonate_id == "docs@example.test"
    assert config.policies.impersonate_id == "operator@example.test"


@pytest.mark.parametrize(
    "settings, expected",
    [
        ({"base_url": DOCUMENT_BASE_URL, "policy_base_url": POLICY_BASE_URL}, DOCUMENTS_SEARCH_URL),
        ({"policy_base_url": POLICY_BASE_URL}, f"{POLICY_BASE_URL}{DEFAULT_DOCUMENTS_SEARCH_PATH}"),
        (
            {"base_url": DOCUMENT_BASE_URL, "policy_base_url": POLICY_BASE_URL, "use_policy_base": True},
            f"{POLICY_BASE_URL}{DEFAULT_DOCUMENTS_SEARCH_PATH}",
        ),
        ({"base_url": DOCUMENT_BASE_URL, "use_policy_base": True}, None),
        ({"base_url": "https://docs.example.test/", "search_path": "search"}, "https://docs.example.test/search"),
        ({"search_url": "https://override.example.test/find"}, "https://override.example.test/find"),
    ],
)
def test_documents_search_url_resolution(settings, expected):
    assert DocumentApiConfig(**settings).resolve_search_url() == expected


def test_download_root_prefers_download_base():
    documents = DocumentApiConfig(
        base_url=DOCUMENT_BASE_URL,
        download_base_url="https://files.example.test/",
        download_path="docs",
    )
    assert documents.resolve_download_root() == "https://files.example.test/docs"
    assert DocumentApiConfig().resolve_download_root() is None


def test_cors_origins_are_split():
    config = load_console_config({"CORS_ALLOW_ORIGINS": "http://a.test, http://b.test,"})
    assert config.cors_allow_origins == ["http://a.test", "http://b.test"]


def test_invalid_timeout_is_rejected():
    with pytest.raises(ValidationError):
        load_console_config({"UPSTREAM_TIMEOUT_SECONDS": "soon"})
