from collections import Counter
from typing import Dict, Iterable, List, Mapping, Sequence

from .models import (
    STATUS_MATCH,
    STATUS_MISMATCH,
    STATUS_MISSING,
    STATUSES,
    MatchResult,
    PaymentRecord,
    RawRow,
    ReconciliationReport,
    ReconciliationSummary,
    TenantRecord,
)
from .normalize import normalize_payments, normalize_tenants

MATCH_TOLERANCE = 0.01
# Differences are compared at this precision so binary noise cannot pull a
# one-cent gap (1000.01 - 1000.00 == 0.00999...) under the tolerance.
COMPARE_DIGITS = 9


class ReconciliationInputError(ValueError):
    """Raised when a run is requested without tenant or payment data."""


def aggregate_payments(payments: Iterable[PaymentRecord]) -> Dict[str, float]:
    if payments is None:
        raise TypeError("payments must be an iterable of PaymentRecord, not None")

    aggregations: Dict[str, float] = {}
    for payment in payments:
        aggregations.setdefault(payment.payer_key, 0.0)
        aggregations[payment.payer_key] += payment.amount
    return aggregations


def classify(actual_amount: float, difference: float, tolerance: float = MATCH_TOLERANCE) -> str:
    # Nothing received is missing even when nothing was expected.
    if actual_amount <= 0:
        return STATUS_MISSING
    if abs(round(difference, COMPARE_DIGITS)) < tolerance:
        return STATUS_MATCH
    return STATUS_MISMATCH


def reconcile(
    tenants: Sequence[TenantRecord],
    payment_totals: Mapping[str, float],
    tolerance: float = MATCH_TOLERANCE,
) -> List[MatchResult]:
    """One match result per tenant, in tenant order."""
    if tenants is None or payment_totals is None:
        raise TypeError("tenants and payment_totals are required")

    totals = dict(payment_totals)
    matches = []
    for tenant in tuple(tenants):
        actual_amount = totals.get(tenant.payer_key, 0.0)
        difference = actual_amount - tenant.expected_rent
        matches.append(MatchResult(
            tenant_name=tenant.name,
            payer_key=tenant.payer_key,
            email=tenant.email,
            phone=tenant.phone,
            address=tenant.address,
            apt=tenant.apt,
            room_no=tenant.room_no,
            expected_rent=tenant.expected_rent,
            actual_amount=actual_amount,
            difference=difference,
            status=classify(actual_amount, difference, tolerance),
        ))
    return matches


def summarize(matches: Sequence[MatchResult]) -> ReconciliationSummary:
    counts = Counter(match.status for match in matches)
    status_counts = {status: counts.get(status, 0) for status in STATUSES}
    match_count = status_counts[STATUS_MATCH]

    return ReconciliationSummary(
        total_expected=sum(match.expected_rent for match in matches),
        total_actual=sum(match.actual_amount for match in matches),
        total_difference=sum(match.difference for match in matches),
        match_count=match_count,
        mismatch_count=len(matches) - match_count,
        missing_count=status_counts[STATUS_MISSING],
        status_counts=status_counts,
    )


def check_inputs(tenant_rows: Sequence[RawRow], *payment_sources: Sequence[RawRow]) -> None:
    if tenant_rows is None or any(source is None for source in payment_sources):
        raise TypeError("input tables must be sequences of rows, not None")
    if not tenant_rows:
        raise ReconciliationInputError("No tenant data: load a tenant file before reconciling")
    if not any(payment_sources):
        raise ReconciliationInputError("No payment data: load a bank or other payment file before reconciling")


def run_reconciliation(
    tenant_rows: Sequence[RawRow],
    bank_rows: Sequence[RawRow],
    other_rows: Sequence[RawRow] = (),
    tolerance: float = MATCH_TOLERANCE,
) -> ReconciliationReport:
    """
        Run normalize -> aggregate -> match over a snapshot of the input tables.

        Bank rows go through the Zelle prefix filter; other payment rows do not. Both
        sources are merged before aggregation, so a tenant's actual amount is the sum
        across every source.
    """
    check_inputs(tenant_rows, bank_rows, other_rows)

    tenant_rows, bank_rows, other_rows = tuple(tenant_rows), tuple(bank_rows), tuple(other_rows)

    tenants = normalize_tenants(tenant_rows)
    payments = (
        normalize_payments(bank_rows, require_prefix_filter=True)
        + normalize_payments(other_rows, require_prefix_filter=False)
    )
    matches = reconcile(tenants, aggregate_payments(payments), tolerance)

    return ReconciliationReport(
        matches=matches,
        summary=summarize(matches),
        payment_count=len(payments),
    )
