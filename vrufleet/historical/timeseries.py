from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional
import random

from vrufleet.historical.kpi import safe_div


@dataclass(frozen=True)
class DailyRecord:
    date: str  # ISO date YYYY-MM-DD
    recovered_liters: float
    avg_temperature_c: float
    sales_amount: float  # recovered_liters * price_per_liter at computation time
    efficiency: float  # 0..1
    outage_reason: Optional[str] = None


@dataclass(frozen=True)
class MonthlyRecord:
    month: str  # YYYY-MM
    recovered_liters: float
    sales_amount: float
    avg_temperature_c: float


@dataclass(frozen=True)
class HourlyRecord:
    timestamp: str  # ISO datetime
    recovered_liters: float
    temperature_c: float
    pressure_psi: float
    efficiency: float


def distribute(total: float, days: int, rng: Optional[random.Random] = None) -> List[int]:
    """Spread a monthly total over ``days`` whole-liter daily values.

    - Daily base = floor(total / days); bases above 5 get +/-20% jitter
    - Residual is walked round-robin one liter at a time so that
      sum(output) == total exactly; decrements never push a day below 0
    - total <= 0 yields all zeros
    """
    if days <= 0:
        raise ValueError("days must be > 0")
    total = int(total)
    if total <= 0:
        return [0] * days
    r = rng or random

    base_avg = total // days
    data: List[int] = []
    for _ in range(days):
        val = base_avg
        if base_avg > 5:
            variance = int(base_avg * 0.2)
            val = base_avg + r.randint(-variance, variance)
        data.append(max(0, val))

    diff = total - sum(data)
    i = 0
    while diff != 0:
        if diff > 0:
            data[i] += 1
            diff -= 1
        elif data[i] > 0:
            data[i] -= 1
            diff += 1
        i = (i + 1) % days
    return data


def aggregate_monthly(daily: Iterable[DailyRecord]) -> List[MonthlyRecord]:
    """Fold daily rows into one MonthlyRecord per YYYY-MM, ascending."""
    grouped: Dict[str, Dict[str, float]] = {}
    for d in daily:
        key = d.date[:7]
        g = grouped.setdefault(key, {"vol": 0.0, "sales": 0.0, "temp_sum": 0.0, "count": 0})
        g["vol"] += d.recovered_liters
        g["sales"] += d.sales_amount
        g["temp_sum"] += d.avg_temperature_c
        g["count"] += 1

    return [
        MonthlyRecord(
            month=m,
            recovered_liters=g["vol"],
            sales_amount=g["sales"],
            avg_temperature_c=round(safe_div(g["temp_sum"], g["count"]), 1),
        )
        for m, g in sorted(grouped.items())
    ]


def filter_window(daily: Iterable[DailyRecord], window: str) -> List[DailyRecord]:
    """Rows for a calendar year ('2025') or everything ('all')."""
    if window == "all":
        return list(daily)
    return [d for d in daily if d.date.startswith(window)]


def validate_window(window: str) -> str:
    w = str(window).strip().lower()
    if w == "all":
        return w
    if len(w) == 4 and w.isdigit():
        return w
    raise ValueError(f"window must be a 4-digit year or 'all', got '{window}'")


def validate_daily_series(
    rows: List[DailyRecord], cutoff: str, price_per_liter: Optional[float] = None, eps: float = 1e-6
) -> bool:
    """True when dates are unique, none is after ``cutoff``, volumes are
    non-negative and (when a price is given) sales match liters * price."""
    seen: set[str] = set()
    for r in rows:
        if r.date in seen or r.date > cutoff or r.recovered_liters < 0:
            return False
        seen.add(r.date)
        if price_per_liter is not None and abs(r.sales_amount - r.recovered_liters * price_per_liter) > eps:
            return False
    return True
