"""Normalization of raw payment and tenant rows into canonical records."""

import math
import re
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .models import Cell, PaymentRecord, RawRow, TenantRecord

ZELLE_PREFIXES = ("Zelle payment from ", "Zelle Scheduled payment from ")
MEMO_TOKEN = " for "
CONFIRMATION_TOKEN = " Conf# "

# Longest numeric prefix of a string, the way a lenient float parse reads it.
LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Logical tenant field -> header names accepted for it, highest priority first.
TENANT_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "name": ("Name", "TenantName"),
    "payer_key": ("Pays as", "Pays As"),
    "expected_rent": ("ExpectedRent", "Expected Rent"),
    "email": ("Email", "email"),
    "phone": ("Phone", "phone", "Phone Number"),
    "address": ("Address", "address"),
    "apt": ("Apt", "apt"),
    "room_no": ("Room No", "RoomNo", "Room", "room_no", "Room#"),
}

TENANT_DISPLAY_FIELDS = ("name", "email", "phone", "address", "apt", "room_no")


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_present(value: Optional[Cell]) -> bool:
    """True for non-empty text and non-zero numbers."""
    if isinstance(value, str):
        return value != ""
    if _is_number(value):
        return value != 0 and not math.isnan(value)
    return False


def cell_text(value: Optional[Cell]) -> str:
    if isinstance(value, str):
        return value
    if _is_number(value) and math.isfinite(value):
        return str(int(value)) if float(value).is_integer() else repr(float(value))
    return ""


def coerce_amount(value: Optional[Cell]) -> float:
    """
        Coerce a currency cell to a finite float.

        Text has every ``,`` and ``$`` removed before parsing; anything that does not
        parse, and any value that is neither text nor a number, becomes ``0.0``.
    """
    if isinstance(value, str):
        match = LEADING_NUMBER.match(value.replace(",", "").replace("$", ""))
        amount = float(match.group()) if match else 0.0
    elif _is_number(value):
        amount = float(value)
    else:
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def resolve_field(row: Mapping[str, Cell], aliases: Sequence[str]) -> Optional[Cell]:
    """First present value among ``aliases``, or None."""
    for alias in aliases:
        value = row.get(alias)
        if is_present(value):
            return value
    return None


def _match_prefix(description: str) -> Optional[str]:
    for prefix in ZELLE_PREFIXES:
        if description.startswith(prefix):
            return prefix
    return None


def payer_key_from_description(description: str, prefix: str = "") -> str:
    """
        Derive a payer identity from a payment memo.

        "Zelle payment from John Smith for May Rent Conf# 12345" -> "john smith"
    """
    key = description[len(prefix):].strip()
    key = key.split(MEMO_TOKEN, 1)[0]
    key = key.split(CONFIRMATION_TOKEN, 1)[0]
    return key.lower().strip()


def normalize_payments(rows: Sequence[RawRow], require_prefix_filter: bool) -> List[PaymentRecord]:
    """
        Clean raw payment rows into canonical payment records.

        Bank statements (``require_prefix_filter``) keep only Zelle transfers and strip
        the processor text from the payer; other sources keep rows that carry both a
        description and an amount and use the description as-is.
    """
    if rows is None:
        raise TypeError("rows must be a sequence of rows, not None")

    payments = []
    for row in rows:
        description = row.get("Description")
        amount = row.get("Amount")

        if require_prefix_filter:
            if not isinstance(description, str):
                continue
            prefix = _match_prefix(description)
            if prefix is None:
                continue
            payments.append(PaymentRecord(
                payer_key=payer_key_from_description(description, prefix),
                amount=coerce_amount(amount),
                date=cell_text(row.get("Date")),
            ))
        else:
            if not (is_present(description) and is_present(amount)):
                continue
            payments.append(PaymentRecord(
                payer_key=cell_text(description).strip().lower(),
                amount=coerce_amount(amount),
                date="",
            ))

    return payments


def normalize_tenant(row: Mapping[str, Cell]) -> TenantRecord:
    display = {
        name: cell_text(resolve_field(row, TENANT_FIELD_ALIASES[name]))
        for name in TENANT_DISPLAY_FIELDS
    }
    pays_as = cell_text(resolve_field(row, TENANT_FIELD_ALIASES["payer_key"]))
    return TenantRecord(
        payer_key=pays_as.strip().lower(),
        expected_rent=coerce_amount(resolve_field(row, TENANT_FIELD_ALIASES["expected_rent"])),
        **display,
    )


def normalize_tenants(rows: Sequence[RawRow]) -> List[TenantRecord]:
    """One tenant record per input row, in input order; rows are never dropped."""
    if rows is None:
        raise TypeError("rows must be a sequence of rows, not None")
    return [normalize_tenant(row) for row in rows]
