from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class DayFinancialInputs:
    revenue: float              # gross sales in local currency, VAT inclusive
    recovered_liters: float
    vat_rate: float             # 0..1
    kw_per_liter: float         # electricity consumption per recovered liter
    cost_per_kw: float          # local currency per kWh


def vat_portion(revenue: float, vat_rate: float) -> float:
    """VAT contained in a VAT-inclusive amount: rev - rev / (1 + vat)."""
    return float(revenue - revenue / (1.0 + vat_rate))


def electricity_cost(recovered_liters: float, kw_per_liter: float, cost_per_kw: float) -> float:
    return float(recovered_liters * kw_per_liter * cost_per_kw)


def daily_expenses(i: DayFinancialInputs) -> float:
    """Local-currency expenses for one day: VAT portion + electricity."""
    return vat_portion(i.revenue, i.vat_rate) + electricity_cost(i.recovered_liters, i.kw_per_liter, i.cost_per_kw)
