"""Header helpers for relaying Catalyst document downloads."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import quote, unquote

DEFAULT_CONTENT_TYPE = "application/octet-stream"

UNAUTHORIZED_HINT = (
    "Download endpoint returned 401 (AD token invalid). The document API may require a different auth "
    "scope or token than search. Check with your API team whether download uses the same token as "
    "document search or a different resource/endpoint."
)
FORBIDDEN_HINT = (
    "Check that Impersonate-Id is correct and the document API allows download with this token. If your "
    "API uses a different impersonation header name, set UAT_POLICY_DOCUMENTS_DOWNLOAD_IMPERSONATE_HEADER "
    "(e.g. X-Impersonate-Id)."
)

_EXTENDED_FILENAME = re.compile(r"filename\*\s*=\s*(?:UTF-8'[^']*')?\"?([^\";\n]+)\"?", re.IGNORECASE)
_PLAIN_FILENAME = re.compile(r"filename\s*=\s*\"?([^\";\n]+)\"?", re.IGNORECASE)


def download_failure_hint(status: int) -> Optional[str]:
    if status == 401:
        return UNAUTHORIZED_HINT
    if status == 403:
        return FORBIDDEN_HINT
    return None


def attachment_disposition(filename: str) -> str:
    """Content-Disposition for a filename; non-ASCII names also get an RFC 5987 filename*."""
    safe = filename.replace('"', "'").replace("\r", "").replace("\n", "")
    if safe.isascii():
        return f'attachment; filename="{safe}"'
    fallback = safe.encode("ascii", "ignore").decode("ascii").strip() or "document"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(safe, safe='')}"


def resolve_content_disposition(upstream: Optional[str], filename: Optional[str], doc_id: str) -> str:
    """Upstream header first, then the caller's filename, then document-<id>."""
    if upstream:
        return upstream
    if filename:
        return attachment_disposition(filename)
    return attachment_disposition(f"document-{doc_id}")


def filename_from_disposition(disposition: Optional[str]) -> Optional[str]:
    if not disposition:
        return None
    match = _EXTENDED_FILENAME.search(disposition) or _PLAIN_FILENAME.search(disposition)
    if not match:
        return None
    return unquote(match.group(1).strip()) or None
