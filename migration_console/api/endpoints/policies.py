import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from migration_console.api.dependencies import acquire_token, get_config, require_param, upstream_client
from migration_console.error_handler import ParseFailure, PolicyNotFound, UpstreamFailure, preview
from migration_console.integrations.clients.real_http import CatalystPolicyClient
from migration_console.integrations.policy.response_wrappers import (
    normalize_policy_detail,
    normalize_policy_summaries,
    parse_upstream_json,
    select_policy_record,
)
from migration_console.utils.config_loader import ConsoleConfig

logger = logging.getLogger(__name__)

api = APIRouter()
policies_api = api

EMPTY_RESULT_MESSAGE = "Catalyst policy search returned 200 but no policy list found. Check server logs for response shape."


@api.get("/search", tags=["Policies"])
async def search_policies(
    date: Optional[str] = Query(default=None, description="Policy effective date (YYYY-MM-DD)"),
    config: ConsoleConfig = Depends(get_config),
):
    date = require_param(date, "Missing required query parameter 'date' (YYYY-MM-DD)")
    credential = config.auth.credential()
    config.policies.search_url()  # fail on a missing base URL before acquiring a token

    async with upstream_client(config) as http_client:
        token = await acquire_token(credential, http_client)
        response = await CatalystPolicyClient(config.policies, http_client).search_by_effective_date(date, token)
    raw = response.text

    if not response.is_success:
        raise UpstreamFailure(
            "UAT policy search returned a non-success status.",
            status=response.status_code,
            body=preview(raw),
        )

    try:
        payload = parse_upstream_json(raw, "policy search")
    except ParseFailure as exc:
        logger.error(f"Policy search parse error: {exc}")
        return {"policies": [], **exc.envelope()}

    policies = normalize_policy_summaries(payload)
    body: Dict[str, Any] = {"policies": [policy.to_wire() for policy in policies]}
    if not policies:
        logger.debug(f"Parsed 0 policies for date={date}; payload type={type(payload).__name__}")
        body["message"] = EMPTY_RESULT_MESSAGE
    return body


@api.get("/detail", tags=["Policies"])
async def policy_detail(
    policy_number: Optional[str] = Query(default=None, alias="policyNumber"),
    config: ConsoleConfig = Depends(get_config),
):
    """
    Coverage, transactions, invoices and beneficiaries for one policy.

    Uses the policy search endpoint with the configured detail searchType and maps the first
    record returned.
    """
    policy_number = require_param(policy_number, "Missing required query parameter 'policyNumber'")
    credential = config.auth.credential()
    config.policies.search_url()

    async with upstream_client(config) as http_client:
        token = await acquire_token(credential, http_client)
        response = await CatalystPolicyClient(config.policies, http_client).find_by_policy_number(
            policy_number, token
        )
    raw = response.text

    if response.status_code == 404:
        raise PolicyNotFound(f"Policy {policy_number} was not found.", status=404, body=preview(raw))
    if not response.is_success:
        raise UpstreamFailure(
            "UAT policy detail lookup returned a non-success status.",
            status=response.status_code,
            body=preview(raw),
        )

    try:
        payload = parse_upstream_json(raw, "policy detail")
    except ParseFailure as exc:
        logger.error(f"Policy detail parse error: {exc}")
        return {"policy": None, **exc.envelope()}

    record = select_policy_record(payload)
    if record is None:
        raise PolicyNotFound(f"Policy {policy_number} was not found.")
    return normalize_policy_detail(record).to_wire()
