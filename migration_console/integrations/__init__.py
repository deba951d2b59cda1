"""
Integrations layer.
This package contains all code used to communicate with the Catalyst platform:
- Authorization endpoint (service credential -> bearer token)
- Document API (policy document search and download)
- Policy API (search by effective date, detail by policy number)

Key rule:
- Routes MUST NOT call Catalyst directly; they go through the clients under
  migration_console/integrations/clients/real_http.
- Raw upstream payloads are reshaped only in migration_console/integrations/policy/response_wrappers.py.
"""

from .contracts.interfaces import AccessToken, RawUpstreamRecord, ServiceCredential
from .contracts.policy_records import (
    BeneficiaryRow,
    CoverageGroup,
    CoverageRow,
    InvoiceRow,
    PolicyDetailView,
    PolicyDocumentRow,
    PolicyOverview,
    PolicySummaryRow,
    TransactionRow,
)

__all__ = [
    # credentials
    "AccessToken", "RawUpstreamRecord", "ServiceCredential",
    # records
    "BeneficiaryRow", "CoverageGroup", "CoverageRow", "InvoiceRow", "PolicyDetailView",
    "PolicyDocumentRow", "PolicyOverview", "PolicySummaryRow", "TransactionRow",
]
