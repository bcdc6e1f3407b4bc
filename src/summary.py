from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Sequence

from src.records import MATERIAL_KEYS, ClinicRecord


@dataclass(frozen=True)
class SummaryTotals:
    count: int = 0
    total_money: Decimal = Decimal("0")
    material_totals: dict[str, int] = field(default_factory=lambda: {key: 0 for key in MATERIAL_KEYS})


def _money_decimal(value: Any) -> Decimal:
    # str() first so 0.1 becomes Decimal("0.1"), not the binary expansion.
    try:
        amount = Decimal(str(value if value is not None else 0))
    except InvalidOperation:
        return Decimal("0")
    return amount if amount.is_finite() else Decimal("0")


def summarize(records: Sequence[ClinicRecord]) -> SummaryTotals:
    total_money = Decimal("0")
    material_totals = {key: 0 for key in MATERIAL_KEYS}
    for record in records:
        total_money += _money_decimal(record.money)
        for key in MATERIAL_KEYS:
            material_totals[key] += int(record.materials.get(key) or 0)
    return SummaryTotals(count=len(records), total_money=total_money, material_totals=material_totals)
