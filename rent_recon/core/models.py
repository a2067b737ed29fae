"""Canonical records produced and consumed by the reconciliation engine."""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Union

# A raw cell is either text or a number; nothing else reaches the normalizers.
Cell = Union[str, float]
RawRow = Dict[str, Cell]
RawTable = List[RawRow]

STATUS_MATCH = "match"
STATUS_MISMATCH = "mismatch"
STATUS_MISSING = "missing"
STATUSES = (STATUS_MATCH, STATUS_MISMATCH, STATUS_MISSING)


@dataclass(frozen=True)
class PaymentRecord:
    payer_key: str
    amount: float
    date: str = ""


@dataclass(frozen=True)
class TenantRecord:
    payer_key: str
    expected_rent: float
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    apt: str = ""
    room_no: str = ""


@dataclass(frozen=True)
class MatchResult:
    tenant_name: str
    payer_key: str
    email: str
    phone: str
    address: str
    apt: str
    room_no: str
    expected_rent: float
    actual_amount: float
    difference: float
    status: str

    def to_dict(self) -> Dict[str, Union[str, float]]:
        """Export shape shared with report writers and the result store."""
        return {
            "tenantName": self.tenant_name,
            "payerKey": self.payer_key,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "apt": self.apt,
            "roomNo": self.room_no,
            "expectedRent": self.expected_rent,
            "actualAmount": self.actual_amount,
            "difference": self.difference,
            "status": self.status,
        }


@dataclass(frozen=True)
class ReconciliationSummary:
    total_expected: float
    total_actual: float
    total_difference: float
    match_count: int
    # Counts every status other than match, missing included.
    mismatch_count: int
    missing_count: int
    status_counts: Mapping[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "totalExpected": self.total_expected,
            "totalActual": self.total_actual,
            "totalDifference": self.total_difference,
            "matchCount": self.match_count,
            "mismatchCount": self.mismatch_count,
            "missingCount": self.missing_count,
            "statusCounts": dict(self.status_counts),
        }


@dataclass(frozen=True)
class ReconciliationReport:
    matches: List[MatchResult]
    summary: ReconciliationSummary
    payment_count: int = 0
