from __future__ import annotations
from typing import Any, Dict, Iterable

# Environmental equivalences
CO2_KG_PER_LITER = 2.31
TREE_ABSORPTION_KG_YEAR = 20
CAR_EMISSION_KG_YEAR = 4600


def safe_div(a: float, b: float) -> float:
    try:
        return float(a) / float(b) if b not in (0, None) else 0.0
    except (TypeError, ValueError):
        return 0.0


def fleet_totals(rows: Iterable[Any]) -> Dict[str, float]:
    """Sum fleet aggregate rows (base currency) and derive the profit margin."""
    liters = revenue = expenses = 0.0
    days = 0
    for r in rows:
        liters += r.recovered_liters
        revenue += r.revenue
        expenses += r.expenses
        days += 1
    profit = revenue - expenses
    return {
        "recovered_liters": liters,
        "revenue": revenue,
        "expenses": expenses,
        "profit": profit,
        "profit_margin": safe_div(profit, revenue),
        "avg_daily_liters": safe_div(liters, days),
        "days": days,
    }


def environmental_impact(recovered_liters: float) -> Dict[str, float]:
    co2_kg = recovered_liters * CO2_KG_PER_LITER
    return {
        "co2_avoided_kg": co2_kg,
        "co2_avoided_tons": co2_kg / 1000.0,
        "tree_equivalent": int(co2_kg // TREE_ABSORPTION_KG_YEAR),
        "cars_removed": int(co2_kg // CAR_EMISSION_KG_YEAR),
    }
