"""Pytest fixtures for the Catalyst proxy routes."""

import pytest
from fastapi.testclient import TestClient

from migration_console.api.main import create_app
from migration_console.utils.config_loader import load_console_config

AUTH_URL = "https://auth.uat.example.test/oauth/token"
POLICY_BASE_URL = "https://policy.uat.example.test"
DOCUMENT_BASE_URL = "https://documents.uat.example.test"
DOCUMENTS_SEARCH_URL = f"{DOCUMENT_BASE_URL}/CatalystDocumentAPI/documents/search"
POLICY_SEARCH_URL = f"{POLICY_BASE_URL}/policy/policies/search"

UAT_ENV = {
    "UAT_AUTH_URL": AUTH_URL,
    "UAT_AUTH_API_VERSION": "1",
    "UAT_AUTH_RESOURCE": "api://catalyst-uat",
    "UAT_AUTH_APP_ID": "console-app",
    "UAT_AUTH_APP_KEY": "s3cret",
    "UAT_API_BASE_URL": POLICY_BASE_URL,
    "UAT_DOCUMENT_API_BASE_URL": DOCUMENT_BASE_URL,
    "UAT_POLICY_IMPERSONATE_ID": "operator@example.test",
}


@pytest.fixture
def uat_env():
    return dict(UAT_ENV)


@pytest.fixture
def console_config(uat_env):
    return load_console_config(uat_env)


@pytest.fixture
def make_client():
    """Build a TestClient around an explicit environment mapping."""

    def _make(env):
        return TestClient(create_app(load_console_config(env)))

    return _make


@pytest.fixture
def client(console_config):
    with TestClient(create_app(console_config)) as test_client:
        yield test_client
