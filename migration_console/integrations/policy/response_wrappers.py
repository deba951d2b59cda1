"""
Tolerant normalizers for Catalyst policy and document responses.

The upstream APIs name the same concept differently across versions (camelCase, PascalCase,
snake_case) and nest lists under different container keys. Each target field has an ordered
table of candidate key paths; the first path holding a non-null value wins. Container probing
works the same way for lists. Nothing here does I/O.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from migration_console.error_handler import ParseFailure
from migration_console.integrations.contracts.interfaces import RawUpstreamRecord
from migration_console.integrations.contracts.policy_records import (
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


class FieldRule(NamedTuple):
    target: str
    candidates: Tuple[str, ...]
    default: str = ""


# Dotted candidates walk nested objects ("basicInfo.policyNumber").
DOCUMENT_FIELDS: Tuple[FieldRule, ...] = (
    FieldRule("id", ("id", "documentId", "DocumentId")),
    FieldRule("created_on", ("createdOn", "createdDate", "created_on", "CreatedOn")),
    FieldRule("created_by", ("createdBy", "createdByUser", "created_by", "CreatedBy")),
    FieldRule("type", ("type", "documentType", "Type")),
    FieldRule("transaction", ("transaction", "transactionCode", "Transaction")),
    FieldRule("kit_id", ("kitId", "kitID", "KitId", "kit_id")),
    FieldRule("document_name", ("documentName", "name", "fileName", "DocumentName")),
    FieldRule("effective_date", ("effectiveDate", "effective_date", "EffectiveDate")),
)

POLICY_SUMMARY_FIELDS: Tuple[FieldRule, ...] = (
    FieldRule("policy_number", ("basicInfo.policyNumber", "policyNumber")),
    FieldRule(
        "date_effective",
        ("basicInfo.effectiveDate", "basicInfo.effective", "dateEffective", "effectiveDate"),
    ),
    FieldRule("product_name", ("basicInfo.productName", "productName"), default="Unknown"),
    FieldRule("status", ("basicInfo.status", "status"), default="Unknown"),
)

POLICY_OVERVIEW_FIELDS: Tuple[FieldRule, ...] = (
    FieldRule("expiration_date", ("basicInfo.expirationDate", "expirationDate")),
    FieldRule("currency", ("basicInfo.billingCurrency", "basicInfo.currency.id", "journey.billCurrency")),
    FieldRule("premium", ("basicInfo.policyPremium", "basicInfo.latestPremium")),
    FieldRule("payment_method", ("latestPaymentInfo.paymentMethod.label",)),
    FieldRule("plan_name", ("basicInfo.planName", "journey.planName")),
)

TRANSACTION_FIELDS: Tuple[FieldRule, ...] = (
    FieldRule("transaction_id", ("transactionId",)),
    FieldRule("code", ("code",)),
    FieldRule("operator", ("operator",)),
    FieldRule("currency", ("currency.id",)),
    FieldRule("created_date", ("createdDate",)),
    FieldRule("effective_date", ("effectiveDate",)),
    FieldRule("amount", ("amount",)),
    FieldRule("charge", ("charge",)),
    FieldRule("tax", ("tax",)),
    FieldRule("reason", ("reason.label", "notes", "transactionDescription")),
)

INVOICE_FIELDS: Tuple[FieldRule, ...] = (
    FieldRule("invoice_id", ("invoiceId",)),
    FieldRule("status", ("status",)),
    FieldRule("installment_begin", ("installmentBegin",)),
    FieldRule("installment_end", ("installmentEnd",)),
    FieldRule("amount", ("amount",)),
    FieldRule("charge", ("charge",)),
    FieldRule("tax", ("tax",)),
    FieldRule("reason", ("reason.label",)),
    FieldRule("currency", ("currency.id",)),
    FieldRule("paid_date", ("paidDate",)),
    FieldRule("processed_date", ("processedDate", "billedOn")),
)

COVERAGE_FIELDS: Tuple[FieldRule, ...] = (
    FieldRule(
        "code",
        ("stdCoverage.stdCoverageCode", "coverageVariantId", "coverageCode", "coverageCodes", "code"),
    ),
    FieldRule(
        "deductible_main",
        ("coverageVariantLevel.insuredLevel.deductible.amount", "deductibleMainInsured", "deductible"),
    ),
    FieldRule(
        "limit_main",
        ("sumInsured", "coverageVariantLevel.insuredLevel.limit.maxAmount", "limitMainInsured", "limit"),
    ),
    FieldRule("deductible_child", ("deductibleChild",)),
    FieldRule("limit_child", ("limitChild",)),
)

BENEFICIARY_FIELDS: Tuple[FieldRule, ...] = (
    FieldRule("percentage", ("percentage",)),
    FieldRule("relationship", ("relationShipToIns.label", "relationShipToIns.id", "relationship")),
    FieldRule("priority", ("priorityLevel", "priority")),
)

# "" is the payload itself.
DOCUMENT_CONTAINER_PATHS: Tuple[str, ...] = (
    "",
    "data.documents",
    "data.data",
    "data.results",
    "documents",
    "details",
    "data",
    "results",
)

POLICY_CONTAINER_PATHS: Tuple[str, ...] = (
    "details",
    "policies",
    "results",
    "items",
    "data",
    "data.details",
    "data.policies",
    "",
)


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------

def lookup_path(data: Any, path: str) -> Any:
    """Value at a dotted path, or None when any step is missing or not an object."""
    if not path:
        return data
    current = data
    for key in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def resolve_field(record: Mapping[str, Any], candidates: Sequence[str], default: str = "") -> str:
    """First candidate with a defined value wins; empty strings count as defined."""
    for candidate in candidates:
        value = lookup_path(record, candidate)
        if value is not None:
            return to_text(value)
    return default


def apply_rules(record: Any, rules: Sequence[FieldRule]) -> Dict[str, str]:
    source = record if isinstance(record, Mapping) else {}
    return {rule.target: resolve_field(source, rule.candidates, rule.default) for rule in rules}


def extract_records(payload: Any, container_paths: Sequence[str] = DOCUMENT_CONTAINER_PATHS) -> List[Any]:
    """Return the first non-empty list found at the given container paths."""
    for path in container_paths:
        candidate = lookup_path(payload, path)
        if isinstance(candidate, list) and candidate:
            return list(candidate)
    return []


def parse_upstream_json(raw: str, resource: str) -> Any:
    """
    Parse an upstream body; an empty body counts as an empty object.

    Raises:
        ParseFailure: the body is not valid JSON
    """
    try:
        return json.loads(raw or "{}")
    except ValueError as exc:
        raise ParseFailure(f"Could not parse {resource} response: {exc}. Check server logs.") from exc


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

def normalize_document(raw: Any) -> PolicyDocumentRow:
    return PolicyDocumentRow(**apply_rules(raw, DOCUMENT_FIELDS))


def normalize_documents(payload: Any) -> List[PolicyDocumentRow]:
    return [normalize_document(item) for item in extract_records(payload, DOCUMENT_CONTAINER_PATHS)]


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------

def normalize_policy_summary(raw: Any, index: int = 0) -> PolicySummaryRow:
    return PolicySummaryRow(**_summary_fields(raw, index))


def normalize_policy_summaries(payload: Any) -> List[PolicySummaryRow]:
    records = extract_records(payload, POLICY_CONTAINER_PATHS)
    return [normalize_policy_summary(raw, index) for index, raw in enumerate(records)]


def select_policy_record(payload: Any) -> Optional[RawUpstreamRecord]:
    """The single policy a detail lookup returned, if any."""
    if isinstance(payload, Mapping) and isinstance(payload.get("basicInfo"), Mapping):
        return payload
    for record in extract_records(payload, POLICY_CONTAINER_PATHS):
        if isinstance(record, Mapping):
            return record
    return None


def normalize_policy_detail(record: RawUpstreamRecord, index: int = 0) -> PolicyDetailView:
    overview = PolicyOverview(**_summary_fields(record, index), **apply_rules(record, POLICY_OVERVIEW_FIELDS))
    transactions = [
        TransactionRow(**apply_rules(tx, TRANSACTION_FIELDS)) for tx in _list_at(record, "transactions")
    ]
    invoices = [InvoiceRow(**apply_rules(inv, INVOICE_FIELDS)) for inv in _list_at(record, "invoices")]
    return PolicyDetailView(
        policy=overview,
        transactions=sort_latest_first(transactions, lambda row: row.created_date),
        invoices=sort_latest_first(invoices, lambda row: row.processed_date),
        coverages=group_coverages(_list_at(record, "insureds")),
        beneficiaries=collect_beneficiaries(_list_at(record, "insureds")),
    )


def _summary_fields(raw: Any, index: int) -> Dict[str, str]:
    record = raw if isinstance(raw, Mapping) else {}
    fields = apply_rules(record, POLICY_SUMMARY_FIELDS)

    people = _list_at(record, "people")
    person = people[0] if people and isinstance(people[0], Mapping) else {}
    full_name = f"{to_text(person.get('firstName'))} {to_text(person.get('lastName'))}".strip()
    fields["customer_name"] = to_text(record.get("customerName")).strip() or full_name or "Unknown customer"

    fields["id"] = resolve_field(record, ("id", "basicInfo.policyNumber", "policyNumber"), default=f"uat-{index}")
    return fields


# ---------------------------------------------------------------------------
# Coverages and beneficiaries
# ---------------------------------------------------------------------------

def group_coverages(insureds: Sequence[Any]) -> List[CoverageGroup]:
    """Coverage rows grouped by variant description, groups in first-seen order."""
    groups: Dict[str, List[CoverageRow]] = {}
    for insured in insureds:
        if not isinstance(insured, Mapping):
            continue
        variants = insured.get("coverageVariants")
        # An insured without variants still gets one row so it shows up in the table.
        if not isinstance(variants, list):
            variants = [{}]
        for variant in variants:
            variant = variant if isinstance(variant, Mapping) else {}
            row = CoverageRow(
                insured_name=_person_name(insured),
                insured_type=to_text(insured.get("insuredType")),
                **apply_rules(variant, COVERAGE_FIELDS),
            )
            groups.setdefault(to_text(variant.get("coverageVariantDesc")), []).append(row)
    return [CoverageGroup(variant_name=name, rows=rows) for name, rows in groups.items()]


def collect_beneficiaries(insureds: Sequence[Any]) -> List[BeneficiaryRow]:
    rows: List[BeneficiaryRow] = []
    for insured in insureds:
        if not isinstance(insured, Mapping):
            continue
        for variant in _list_at(insured, "coverageVariants"):
            if not isinstance(variant, Mapping):
                continue
            for beneficiary in _list_at(variant, "beneficiaries"):
                if not isinstance(beneficiary, Mapping):
                    continue
                rows.append(
                    BeneficiaryRow(
                        insured_name=_person_name(insured),
                        coverage=to_text(variant.get("coverageVariantDesc")),
                        name=_beneficiary_name(beneficiary),
                        phone=_contact_detail(beneficiary, "phone"),
                        email=_contact_detail(beneficiary, "email"),
                        **apply_rules(beneficiary, BENEFICIARY_FIELDS),
                    )
                )
    return rows


def _beneficiary_name(beneficiary: Mapping[str, Any]) -> str:
    if beneficiary.get("name") is not None:
        return to_text(beneficiary["name"])
    if beneficiary.get("firstName") is not None or beneficiary.get("lastName") is not None:
        return _person_name(beneficiary)
    return to_text(beneficiary.get("label"))


def _contact_detail(record: Mapping[str, Any], kind: str) -> str:
    details = record.get("contactDetails")
    if isinstance(details, list):
        for detail in details:
            if isinstance(detail, Mapping) and to_text(detail.get("type")).lower() == kind:
                if detail.get("detail") is not None:
                    return to_text(detail["detail"])
                break
    return to_text(record.get(kind))


def _person_name(record: Mapping[str, Any]) -> str:
    parts = [to_text(record.get("firstName")), to_text(record.get("lastName"))]
    return " ".join(p for p in parts if p)


def _list_at(record: Any, path: str) -> List[Any]:
    value = lookup_path(record, path)
    return value if isinstance(value, list) else []


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

# Sorts below every real date, including ones before 1970.
UNDATED = float("-inf")


def sort_latest_first(rows, date_of):
    """Newest first; rows with a missing or unparseable date sink to the end."""
    return sorted(rows, key=lambda row: _sort_timestamp(date_of(row)), reverse=True)


def _sort_timestamp(value: str) -> float:
    if not value:
        return UNDATED
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()
    except (ValueError, OverflowError, OSError):
        return UNDATED
