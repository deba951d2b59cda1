"""
Catalyst Document API HTTP client.

Purpose:
- Searches policy documents by policy number
- Opens a streamed download of a single document

The client only builds and sends requests; status interpretation and normalization happen
in the proxy routes.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict
from urllib.parse import quote

import httpx

from migration_console.integrations.contracts.interfaces import AccessToken
from migration_console.utils.config_loader import DocumentApiConfig

logger = logging.getLogger(__name__)


class CatalystDocumentsClient:
    def __init__(self, config: DocumentApiConfig, http_client: httpx.AsyncClient) -> None:
        self.config = config
        self.http_client = http_client

    def search_payload(self, policy_number: str) -> Dict[str, Any]:
        return {
            "requestId": str(uuid.uuid4()),
            "impersonateId": self.config.impersonate_id,
            "data": {"context": [{"key": "POLICY", "value": policy_number}]},
        }

    async def search(self, search_url: str, policy_number: str, token: AccessToken) -> httpx.Response:
        headers = {
            "Content-Type": "application/json",
            "apiversion": self.config.search_api_version,
            **token.bearer_header(),
        }
        logger.info("POST %s policyNumber=%s", search_url, policy_number)
        response = await self.http_client.post(search_url, json=self.search_payload(policy_number), headers=headers)
        logger.info("Documents search status=%s body_length=%d", response.status_code, len(response.content))
        return response

    def download_url(self, download_root: str, doc_id: str) -> str:
        return (
            f"{download_root}/{quote(doc_id, safe='')}/download"
            f"?api-version={self.config.download_api_version}"
        )

    def download_headers(self, token: AccessToken) -> Dict[str, str]:
        headers = {"apiversion": self.config.download_api_version, **token.bearer_header()}
        if self.config.impersonate_id:
            headers[self.config.impersonate_header] = self.config.impersonate_id
        return headers

    async def open_download(self, download_root: str, doc_id: str, token: AccessToken) -> httpx.Response:
        """Send the download request without reading the body; the caller must close the response."""
        url = self.download_url(download_root, doc_id)
        logger.info("GET %s (impersonation header %s)", url, self.config.impersonate_header)
        request = self.http_client.build_request("GET", url, headers=self.download_headers(token))
        return await self.http_client.send(request, stream=True)
