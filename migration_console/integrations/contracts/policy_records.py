"""
Policy record contracts.

Fixed row shapes the console views render. Every field is a string so the views never
special-case types; a value the upstream API did not send is "" rather than null.

Field names are snake_case in Python and camelCase on the wire (model_dump(by_alias=True)).
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RecordModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class PolicyDocumentRow(RecordModel):
    id: str = ""
    created_on: str = ""
    created_by: str = ""
    type: str = ""
    transaction: str = ""
    kit_id: str = ""
    document_name: str = ""
    effective_date: str = ""


class PolicySummaryRow(RecordModel):
    id: str = ""
    policy_number: str = ""
    date_effective: str = ""
    customer_name: str = ""
    product_name: str = ""
    status: str = ""


class PolicyOverview(PolicySummaryRow):
    expiration_date: str = ""
    currency: str = ""
    premium: str = ""
    payment_method: str = ""
    plan_name: str = ""


class TransactionRow(RecordModel):
    transaction_id: str = ""
    code: str = ""
    operator: str = ""
    currency: str = ""
    created_date: str = ""
    effective_date: str = ""
    amount: str = ""
    charge: str = ""
    tax: str = ""
    reason: str = ""


class InvoiceRow(RecordModel):
    invoice_id: str = ""
    status: str = ""
    installment_begin: str = ""
    installment_end: str = ""
    amount: str = ""
    charge: str = ""
    tax: str = ""
    reason: str = ""
    currency: str = ""
    paid_date: str = ""
    processed_date: str = ""


class CoverageRow(RecordModel):
    insured_name: str = ""
    insured_type: str = ""
    code: str = ""
    deductible_main: str = ""
    limit_main: str = ""
    deductible_child: str = ""
    limit_child: str = ""


class CoverageGroup(RecordModel):
    variant_name: str = ""
    rows: List[CoverageRow] = Field(default_factory=list)


class BeneficiaryRow(RecordModel):
    insured_name: str = ""
    coverage: str = ""
    name: str = ""
    phone: str = ""
    email: str = ""
    percentage: str = ""
    relationship: str = ""
    priority: str = ""


class PolicyDetailView(RecordModel):
    policy: PolicyOverview
    transactions: List[TransactionRow] = Field(default_factory=list)
    invoices: List[InvoiceRow] = Field(default_factory=list)
    coverages: List[CoverageGroup] = Field(default_factory=list)
    beneficiaries: List[BeneficiaryRow] = Field(default_factory=list)
