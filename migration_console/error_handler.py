"""Error taxonomy and envelope helpers for the policy proxy routes."""
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

ERROR_PREVIEW_CHARS = 400
BODY_PREVIEW_CHARS = 500


class ConsoleError(Exception):
    """Base class for failures that are rendered as a ProxyErrorEnvelope."""

    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        body: Optional[str] = None,
        hint: Optional[str] = None,
        tried_url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body
        self.hint = hint
        self.tried_url = tried_url

    def envelope(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.status is not None:
            payload["status"] = self.status
        if self.body is not None:
            payload["body"] = self.body
        if self.hint:
            payload["hint"] = self.hint
        if self.tried_url:
            payload["triedUrl"] = self.tried_url
        return payload


class ConfigurationError(ConsoleError):
    status_code = 500


class InputValidationError(ConsoleError):
    status_code = 400


class AuthFailure(ConsoleError):
    status_code = 502


class UpstreamFailure(ConsoleError):
    status_code = 502


class ParseFailure(ConsoleError):
    # Reported inside a normal JSON response, not as a gateway error.
    status_code = 200


class PolicyNotFound(ConsoleError):
    status_code = 404


def preview(text: Optional[str], limit: int = BODY_PREVIEW_CHARS) -> str:
    return (text or "")[:limit]


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        """Envelope for anything that escaped the typed error paths."""
        if isinstance(exc, ConsoleError):
            return exc.envelope()
        logger.error("Unhandled exception in policy proxy: %s", exc, exc_info=True)
        message = str(exc) or "Unexpected error while calling UAT policy APIs."
        payload: Dict[str, Any] = {"error": message}
        if context:
            payload["context"] = context
        return payload
