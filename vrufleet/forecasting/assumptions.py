from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Scenario:
    growth_mom: float = 0.05             # month-over-month volume growth
    horizon_months: int = 6
    confidence_band: float = 0.10        # +/- around the forecast
    fallback_liters: float = 15000.0     # base month when there is no history
    revenue_per_liter: float = 2.4       # blended SAR per liter for projected revenue


def validate_scenario(s: Scenario) -> None:
    if not (-0.5 <= s.growth_mom <= 0.5):
        raise ValueError("monthly growth must be between -50% and 50%")
    if not (1 <= s.horizon_months <= 36):
        raise ValueError("horizon must be between 1 and 36 months")
    if not (0.0 <= s.confidence_band < 1.0):
        raise ValueError("confidence band must be between 0 and 100%")
    if s.fallback_liters < 0 or s.revenue_per_liter < 0:
        raise ValueError("fallback liters and revenue per liter must be >= 0")
