import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from starlette.responses import StreamingResponse

from migration_console.api.dependencies import acquire_token, get_config, require_param, upstream_client
from migration_console.error_handler import (
    ERROR_PREVIEW_CHARS,
    ConfigurationError,
    InputValidationError,
    ParseFailure,
    UpstreamFailure,
    preview,
)
from migration_console.integrations.clients.real_http import CatalystDocumentsClient
from migration_console.integrations.policy.document_download import (
    DEFAULT_CONTENT_TYPE,
    download_failure_hint,
    resolve_content_disposition,
)
from migration_console.integrations.policy.response_wrappers import normalize_documents, parse_upstream_json
from migration_console.utils.config_loader import ConsoleConfig

logger = logging.getLogger(__name__)

api = APIRouter()
documents_api = api

NOT_FOUND_HINT = (
    "Set UAT_POLICY_DOCUMENTS_URL to the exact full URL from Postman, or add "
    "UAT_POLICY_DOCUMENTS_USE_POLICY_BASE=true to use the policy base URL (UAT_API_BASE_URL), or set "
    "UAT_POLICY_DOCUMENTS_PATH to try another path."
)
EMPTY_RESULT_MESSAGE = (
    "Catalyst API returned 200 but no document list found. Check server logs for response shape."
)


@api.get("/documents", tags=["Documents"])
async def search_documents(
    policy_number: Optional[str] = Query(default=None, alias="policyNumber"),
    config: ConsoleConfig = Depends(get_config),
):
    policy_number = require_param(policy_number, "Missing required query parameter 'policyNumber'")
    credential = config.auth.credential()

    search_url = config.documents.resolve_search_url()
    if not search_url:
        return {"documents": []}

    async with upstream_client(config) as http_client:
        token = await acquire_token(credential, http_client)
        response = await CatalystDocumentsClient(config.documents, http_client).search(
            search_url, policy_number, token
        )
    raw = response.text

    if not response.is_success:
        logger.debug("Documents search failure body: %s", raw[:800])
        message = (
            f"Documents API error {response.status_code}: "
            f"{raw[:ERROR_PREVIEW_CHARS] or response.reason_phrase}"
        )
        if response.status_code == 404:
            # Usually a wrong base URL or path, not a missing policy.
            return {"documents": [], "error": message, "triedUrl": search_url, "hint": NOT_FOUND_HINT}
        raise UpstreamFailure(message, status=response.status_code, body=preview(raw))

    try:
        payload = parse_upstream_json(raw, "documents")
    except ParseFailure as exc:
        logger.error("Documents parse error: %s raw slice: %s", exc, raw[:300])
        return {"documents": [], **exc.envelope()}

    documents = normalize_documents(payload)
    body: Dict[str, Any] = {"documents": [doc.to_wire() for doc in documents]}
    if not documents:
        _log_payload_shape(payload)
        body["message"] = EMPTY_RESULT_MESSAGE
    return body


@api.get("/documents/{doc_id}/download", tags=["Documents"])
async def download_document(
    doc_id: str,
    filename: Optional[str] = Query(default=None),
    config: ConsoleConfig = Depends(get_config),
):
    if not doc_id.strip():
        raise InputValidationError("Missing docId")
    credential = config.auth.credential()

    download_root = config.documents.resolve_download_root()
    if not download_root:
        raise ConfigurationError(
            "Document download URL not configured "
            "(UAT_DOCUMENT_API_BASE_URL or UAT_POLICY_DOCUMENTS_DOWNLOAD_BASE_URL)."
        )

    # The client outlives this function: relay_body closes it when streaming ends or fails.
    http_client = upstream_client(config)
    try:
        token = await acquire_token(credential, http_client)
        upstream = await CatalystDocumentsClient(config.documents, http_client).open_download(
            download_root, doc_id, token
        )
    except BaseException:
        await http_client.aclose()
        raise

    if not upstream.is_success:
        try:
            await upstream.aread()
            text = upstream.text
        finally:
            await upstream.aclose()
            await http_client.aclose()
        logger.info("Document download failed: status=%s body=%s", upstream.status_code, text[:300])
        raise UpstreamFailure(
            f"Document download failed: {upstream.status_code}",
            status=upstream.status_code,
            body=preview(text),
            hint=download_failure_hint(upstream.status_code),
        )

    headers = {
        "Content-Type": upstream.headers.get("Content-Type", DEFAULT_CONTENT_TYPE),
        "Content-Disposition": resolve_content_disposition(
            upstream.headers.get("Content-Disposition"), filename, doc_id
        ),
    }

    async def relay_body():
        try:
            async for chunk in upstream.aiter_bytes():
                yield chunk
        finally:
            await upstream.aclose()
            await http_client.aclose()

    return StreamingResponse(relay_body(), status_code=200, headers=headers)


def _log_payload_shape(payload: Any) -> None:
    if isinstance(payload, dict):
        logger.debug("Parsed 0 documents. Top-level keys: %s", list(payload.keys()))
        data = payload.get("data")
        if isinstance(data, dict):
            logger.debug("data keys: %s", list(data.keys()))
    else:
        logger.debug("Parsed 0 documents from a %s payload", type(payload).__name__)

