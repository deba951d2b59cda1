"""
Configuration loader for the migration console proxy.

Settings come from environment variables (a .env file is loaded by the app module).
The config object is built once per process and handed to the routes; required auth
settings are only enforced when a route actually needs a credential, so a partially
configured console still starts and answers with a configuration error envelope.
"""

import logging
import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from migration_console.error_handler import ConfigurationError
from migration_console.integrations.contracts.interfaces import ServiceCredential

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENTS_SEARCH_PATH = "/CatalystDocumentAPI/documents/search"
DEFAULT_DOCUMENTS_DOWNLOAD_PATH = "/CatalystDocumentAPI/documents"
DEFAULT_IMPERSONATE_HEADER = "ImpersonateId"

_AUTH_ENV_NAMES = {
    "auth_url": "UAT_AUTH_URL",
    "resource": "UAT_AUTH_RESOURCE",
    "app_id": "UAT_AUTH_APP_ID",
    "app_key": "UAT_AUTH_APP_KEY",
    "api_version": "UAT_AUTH_API_VERSION",
}


class AuthConfig(BaseModel):
    """Service credential used against the UAT authorization endpoint"""

    auth_url: Optional[str] = None
    api_version: str = "1"
    resource: Optional[str] = None
    app_id: Optional[str] = None
    app_key: Optional[str] = Field(default=None, repr=False)

    def credential(self) -> ServiceCredential:
        """
        Build the service credential, failing when any part of it is missing.

        Raises:
            ConfigurationError: one or more UAT_AUTH_* variables are not set
        """
        missing = [env for field_name, env in _AUTH_ENV_NAMES.items() if not getattr(self, field_name)]
        if missing:
            raise ConfigurationError(
                f"UAT environment is not fully configured ({', '.join(missing)})."
            )
        return ServiceCredential(
            auth_url=self.auth_url,
            api_version=self.api_version,
            resource=self.resource,
            app_id=self.app_id,
            app_key=self.app_key,
        )


class DocumentApiConfig(BaseModel):
    """Catalyst document API locations"""

    base_url: Optional[str] = None
    policy_base_url: Optional[str] = None
    use_policy_base: bool = False
    search_path: str = DEFAULT_DOCUMENTS_SEARCH_PATH
    search_url: Optional[str] = None
    search_api_version: str = "2"
    download_base_url: Optional[str] = None
    download_path: str = DEFAULT_DOCUMENTS_DOWNLOAD_PATH
    download_api_version: str = "1"
    impersonate_id: str = ""
    impersonate_header: str = DEFAULT_IMPERSONATE_HEADER

    def resolve_search_url(self) -> Optional[str]:
        """Full documents search URL, or None when no base URL is configured."""
        if self.search_url:
            return self.search_url
        if self.use_policy_base:
            base = self.policy_base_url
        else:
            base = self.base_url or self.policy_base_url
        if not base:
            return None
        return f"{base.rstrip('/')}{_leading_slash(self.search_path)}"

    def resolve_download_root(self) -> Optional[str]:
        """Download URL prefix; the document id and /download suffix are appended per request."""
        base = self.download_base_url or self.base_url or self.policy_base_url
        if not base:
            return None
        return f"{base.rstrip('/')}{_leading_slash(self.download_path)}"


class PolicyApiConfig(BaseModel):
    """Catalyst policy API settings"""

    base_url: Optional[str] = None
    api_version: str = "2"
    language: str = "en"
    impersonate_id: str = ""
    detail_search_type: str = "ByPolicyNumber"

    def search_url(self) -> str:
        if not self.base_url:
            raise ConfigurationError(
                "UAT environment is not fully configured. Ensure UAT_API_BASE_URL is set."
            )
        return f"{self.base_url.rstrip('/')}/policy/policies/search"


class ConsoleConfig(BaseModel):
    """Complete console configuration"""

    auth: AuthConfig = Field(default_factory=AuthConfig)
    documents: DocumentApiConfig = Field(default_factory=DocumentApiConfig)
    policies: PolicyApiConfig = Field(default_factory=PolicyApiConfig)
    timeout_seconds: float = Field(default=30.0, gt=0)
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def load_console_config(environ: Optional[Mapping[str, str]] = None) -> ConsoleConfig:
    """
    Build the console configuration from environment variables

    Args:
        environ: Mapping to read from. Defaults to os.environ

    Returns:
        Validated ConsoleConfig object

    Raises:
        ValidationError: If a value has the wrong type (e.g. a non-numeric timeout)
    """
    env = os.environ if environ is None else environ

    def get(name: str, default: Optional[str] = None) -> Optional[str]:
        value = env.get(name)
        if value is None or not value.strip():
            return default
        return value.strip()

    shared_impersonate_id = get("UAT_POLICY_IMPERSONATE_ID", "")
    policy_base_url = get("UAT_API_BASE_URL")

    config_data = {
        "auth": {
            "auth_url": get("UAT_AUTH_URL"),
            "api_version": get("UAT_AUTH_API_VERSION", "1"),
            "resource": get("UAT_AUTH_RESOURCE"),
            "app_id": get("UAT_AUTH_APP_ID"),
            "app_key": get("UAT_AUTH_APP_KEY"),
        },
        "documents": {
            "base_url": get("UAT_DOCUMENT_API_BASE_URL"),
            "policy_base_url": policy_base_url,
            "use_policy_base": (get("UAT_POLICY_DOCUMENTS_USE_POLICY_BASE", "") or "").lower() == "true",
            "search_path": get("UAT_POLICY_DOCUMENTS_PATH", DEFAULT_DOCUMENTS_SEARCH_PATH),
            "search_url": get("UAT_POLICY_DOCUMENTS_URL"),
            "search_api_version": get("UAT_POLICY_DOCUMENTS_API_VERSION", "2"),
            "download_base_url": get("UAT_POLICY_DOCUMENTS_DOWNLOAD_BASE_URL"),
            "download_path": get("UAT_POLICY_DOCUMENTS_DOWNLOAD_PATH", DEFAULT_DOCUMENTS_DOWNLOAD_PATH),
            "download_api_version": get("UAT_POLICY_DOCUMENTS_DOWNLOAD_API_VERSION", "1"),
            "impersonate_id": get("UAT_POLICY_DOCUMENTS_IMPERSONATE_ID", shared_impersonate_id),
            "impersonate_header": get("UAT_POLICY_DOCUMENTS_DOWNLOAD_IMPERSONATE_HEADER", DEFAULT_IMPERSONATE_HEADER),
        },
        "policies": {
            "base_url": policy_base_url,
            "api_version": get("UAT_POLICY_API_VERSION", "2"),
            "language": get("UAT_POLICY_SEARCH_LANGUAGE", "en"),
            "impersonate_id": get("UAT_POLICY_SEARCH_IMPERSONATE_ID", shared_impersonate_id),
            "detail_search_type": get("UAT_POLICY_DETAIL_SEARCH_TYPE", "ByPolicyNumber"),
        },
        "timeout_seconds": get("UPSTREAM_TIMEOUT_SECONDS", "30"),
        "cors_allow_origins": [o.strip() for o in (get("CORS_ALLOW_ORIGINS", "*") or "*").split(",") if o.strip()],
        "log_level": (get("LOG_LEVEL", "INFO") or "INFO").upper(),
    }

    try:
        config = ConsoleConfig(**config_data)
    except ValidationError as e:
        logger.error(f"Console config validation failed: {e}")
        raise

    if not config.documents.resolve_search_url():
        logger.warning("No document API base URL configured; documents search will return empty results.")
    return config


def _leading_slash(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"
