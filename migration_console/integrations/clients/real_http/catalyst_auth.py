"""
Catalyst authorization client.

Exchanges the static service credential for a bearer token. One POST per call: tokens are
not cached, so every proxied request acquires its own.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from migration_console.error_handler import AuthFailure, ConfigurationError, preview
from migration_console.integrations.contracts.interfaces import AccessToken, ServiceCredential

logger = logging.getLogger(__name__)


class CatalystAuthClient:
    def __init__(self, credential: ServiceCredential, http_client: httpx.AsyncClient) -> None:
        self.credential = credential
        self.http_client = http_client

    async def acquire_token(self) -> AccessToken:
        """
        Request a bearer token from the authorization endpoint.

        Raises:
            ConfigurationError: the credential is incomplete (no request is sent)
            AuthFailure: non-2xx status, or a 2xx body without access_token
        """
        missing = self.credential.missing_fields()
        if missing:
            raise ConfigurationError(f"Service credential is incomplete: missing {', '.join(missing)}.")

        logger.info("Requesting access token from %s", self.credential.auth_url)
        response = await self.http_client.post(
            self.credential.auth_url,
            headers=self.credential.auth_headers(),
            json={},
        )

        if not response.is_success:
            logger.warning("Token request failed: status=%s", response.status_code)
            raise AuthFailure(
                "Failed to obtain access token from UAT authorization endpoint.",
                status=response.status_code,
                body=response.text,
            )

        token = _access_token_from(response)
        if not token:
            logger.warning("Token response had no access_token (status=%s)", response.status_code)
            raise AuthFailure(
                "Authorization endpoint did not return access_token.",
                status=response.status_code,
                body=preview(response.text),
            )
        return AccessToken(value=token)


def _access_token_from(response: httpx.Response) -> str:
    try:
        data: Any = response.json()
    except ValueError:
        return ""
    if not isinstance(data, dict):
        return ""
    token = data.get("access_token")
    return token if isinstance(token, str) else ""
