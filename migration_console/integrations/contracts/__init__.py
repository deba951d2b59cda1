"""
Contracts (data models).

This folder defines the shapes exchanged with the Catalyst APIs and returned to the console:
- Service credential and access token
- Normalized document, policy, transaction, invoice, coverage and beneficiary rows

Both the normalizer and the proxy routes rely on these models instead of ad-hoc dicts.
"""

from .interfaces import AccessToken, RawUpstreamRecord, ServiceCredential
from .policy_records import (
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
    "AccessToken",
    "RawUpstreamRecord",
    "ServiceCredential",
    "BeneficiaryRow",
    "CoverageGroup",
    "CoverageRow",
    "InvoiceRow",
    "PolicyDetailView",
    "PolicyDocumentRow",
    "PolicyOverview",
    "PolicySummaryRow",
    "TransactionRow",
]
