from __future__ import annotations
from typing import Any, Dict, Iterable, List
from vrufleet.forecasting.assumptions import Scenario, validate_scenario


def monthly_liters(rows: Iterable[Any]) -> Dict[str, float]:
    """Sum fleet aggregate rows into YYYY-MM -> liters."""
    out: Dict[str, float] = {}
    for r in rows:
        m = r.date[:7]
        out[m] = out.get(m, 0.0) + r.recovered_liters
    return out


def _next_month(month: str) -> str:
    y, m = int(month[:4]), int(month[5:7])
    y, m = (y + 1, 1) if m == 12 else (y, m + 1)
    return f"{y:04d}-{m:02d}"


def project_months(history_rows: Iterable[Any], scenario: Scenario) -> List[Dict[str, Any]]:
    """Compound the last historical month forward.

    Outputs one row per horizon month with:
    - month (YYYY-MM, following the last history month)
    - forecast, confidence_lower, confidence_upper (liters, rounded)
    - projected_revenue (forecast * revenue_per_liter)
    """
    validate_scenario(scenario)
    by_month = monthly_liters(history_rows)
    months = sorted(by_month)
    if months:
        last_val = by_month[months[-1]] or scenario.fallback_liters
        month = months[-1]
    else:
        last_val = scenario.fallback_liters
        month = None

    rows: List[Dict[str, Any]] = []
    for _ in range(scenario.horizon_months):
        last_val = last_val * (1.0 + scenario.growth_mom)
        month = _next_month(month) if month else None
        rows.append({
            "month": month,
            "forecast": round(last_val),
            "confidence_lower": round(last_val * (1.0 - scenario.confidence_band)),
            "confidence_upper": round(last_val * (1.0 + scenario.confidence_band)),
            "projected_revenue": last_val * scenario.revenue_per_liter,
        })
    return rows
