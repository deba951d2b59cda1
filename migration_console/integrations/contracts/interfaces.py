from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping


# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

# A record as the Catalyst APIs return it: keys and nesting vary by API version.
RawUpstreamRecord = Mapping[str, Any]


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ServiceCredential:
    auth_url: str
    api_version: str
    resource: str
    app_id: str
    app_key: str = field(repr=False)

    def missing_fields(self) -> List[str]:
        return [f.name for f in fields(self) if not getattr(self, f.name)]

    def auth_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "apiVersion": self.api_version,
            "Resource": self.resource,
            "App_ID": self.app_id,
            "App_Key": self.app_key,
        }


@dataclass(frozen=True)
class AccessToken:
    value: str = field(repr=False)

    def bearer_header(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.value}"}
