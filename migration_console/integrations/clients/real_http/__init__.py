"""
Real HTTP integration clients.

These clients communicate with the Catalyst UAT environment via httpx:
- authorization endpoint (bearer tokens)
- document search / download
- policy search

Important:
- Each client receives the per-request httpx.AsyncClient; nothing is pooled or cached
- Clients return raw httpx responses; shaping happens in integrations/policy/response_wrappers.py
"""

from .catalyst_auth import CatalystAuthClient
from .catalyst_documents import CatalystDocumentsClient
from .catalyst_policies import CatalystPolicyClient

__all__ = ["CatalystAuthClient", "CatalystDocumentsClient", "CatalystPolicyClient"]
