import logging
from typing import Optional

import httpx
from fastapi import Request

from migration_console.error_handler import InputValidationError
from migration_console.integrations.clients.real_http import CatalystAuthClient
from migration_console.integrations.contracts.interfaces import AccessToken, ServiceCredential
from migration_console.utils.config_loader import ConsoleConfig

logger = logging.getLogger(__name__)


def get_config(request: Request) -> ConsoleConfig:
    return request.app.state.config


def upstream_client(config: ConsoleConfig) -> httpx.AsyncClient:
    # One client per inbound request; nothing is pooled across requests.
    return httpx.AsyncClient(timeout=config.timeout_seconds, follow_redirects=True)


def require_param(value: Optional[str], message: str) -> str:
    if value is None or not value.strip():
        raise InputValidationError(message)
    return value


async def acquire_token(credential: ServiceCredential, http_client: httpx.AsyncClient) -> AccessToken:
    return await CatalystAuthClient(credential, http_client).acquire_token()
