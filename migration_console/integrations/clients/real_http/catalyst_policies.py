"""
Catalyst Policy API HTTP client.

Used by the policy search (by effective date) and policy detail (by policy number) routes.
Both go through the same search endpoint with a different searchType.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

from migration_console.integrations.contracts.interfaces import AccessToken
from migration_console.utils.config_loader import PolicyApiConfig

logger = logging.getLogger(__name__)

SEARCH_BY_EFFECTIVE_DATE = "ByPolicyEffectiveDate"


class CatalystPolicyClient:
    def __init__(self, config: PolicyApiConfig, http_client: httpx.AsyncClient) -> None:
        self.config = config
        self.http_client = http_client

    def search_payload(self, search_value: str, search_type: str) -> Dict[str, Any]:
        return {
            "impersonateID": self.config.impersonate_id,
            "language": self.config.language,
            "searchvalue": search_value,
            "searchType": search_type,
            "resultType": "Detailed",
        }

    async def search(self, search_value: str, search_type: str, token: AccessToken) -> httpx.Response:
        url = self.config.search_url()
        headers = {
            "Content-Type": "application/json",
            "apiversion": self.config.api_version,
            **token.bearer_header(),
        }
        logger.info(f"POST {url} searchType={search_type}")
        response = await self.http_client.post(url, json=self.search_payload(search_value, search_type), headers=headers)
        logger.info(f"Policy search status={response.status_code}")
        return response

    async def search_by_effective_date(self, date: str, token: AccessToken) -> httpx.Response:
        return await self.search(date, SEARCH_BY_EFFECTIVE_DATE, token)

    async def find_by_policy_number(self, policy_number: str, token: AccessToken) -> httpx.Response:
        return await self.search(policy_number, self.config.detail_search_type, token)
