"""Export layout: match results grouped by apartment with per-group subtotals."""

from typing import Dict, List, Sequence, Tuple

from .models import MatchResult, ReconciliationSummary

GROUP_FIRST_SEEN = "first_seen"
GROUP_ALPHABETICAL = "alphabetical"
GROUP_ORDERS = (GROUP_FIRST_SEEN, GROUP_ALPHABETICAL)

ROW_TENANT = "tenant"
ROW_SUBTOTAL = "subtotal"

# (export header, MatchResult.to_dict key)
EXPORT_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("Apt", "apt"),
    ("Tenant Name", "tenantName"),
    ("Pays As", "payerKey"),
    ("Email", "email"),
    ("Phone", "phone"),
    ("Address", "address"),
    ("Room No", "roomNo"),
    ("Expected Rent", "expectedRent"),
    ("Actual Amount", "actualAmount"),
    ("Difference", "difference"),
    ("Status", "status"),
)

SUMMARY_LABELS: Tuple[Tuple[str, str], ...] = (
    ("Total Expected", "totalExpected"),
    ("Total Actual", "totalActual"),
    ("Total Difference", "totalDifference"),
    ("Matched", "matchCount"),
    ("Not Matched", "mismatchCount"),
    ("Missing", "missingCount"),
)


def group_by_apt(matches: Sequence[MatchResult], group_order: str = GROUP_FIRST_SEEN) -> Dict[str, List[MatchResult]]:
    if group_order not in GROUP_ORDERS:
        raise ValueError(f"Unknown group order '{group_order}', expected one of {GROUP_ORDERS}")

    groups: Dict[str, List[MatchResult]] = {}
    for match in matches:
        groups.setdefault(match.apt, []).append(match)

    if group_order == GROUP_ALPHABETICAL:
        return {apt: groups[apt] for apt in sorted(groups)}
    return groups


def build_export_rows(matches: Sequence[MatchResult], group_order: str = GROUP_FIRST_SEEN) -> List[Dict[str, object]]:
    """
        Flatten match results into export rows.

        Tenants keep their input order inside each apartment group, and every group
        ends with a subtotal row of expected rent and actual amount.
    """
    rows = []
    for apt, members in group_by_apt(matches, group_order).items():
        for match in members:
            row = match.to_dict()
            row["rowType"] = ROW_TENANT
            rows.append(row)

        rows.append({
            "rowType": ROW_SUBTOTAL,
            "apt": apt,
            "tenantName": f"Subtotal {apt}".strip(),
            "expectedRent": sum(match.expected_rent for match in members),
            "actualAmount": sum(match.actual_amount for match in members),
        })
    return rows


def export_table(rows: Sequence[Dict[str, object]]) -> List[List[object]]:
    """Header line followed by one value list per export row."""
    table: List[List[object]] = [[header for header, _ in EXPORT_COLUMNS]]
    for row in rows:
        table.append([row.get(key, "") for _, key in EXPORT_COLUMNS])
    return table


def summary_table(summary: ReconciliationSummary) -> List[List[object]]:
    values = summary.to_dict()
    return [[label, values[key]] for label, key in SUMMARY_LABELS]


def format_currency(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
