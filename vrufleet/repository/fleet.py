from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from vrufleet.currency.rates import quote_to_base
from vrufleet.finance.expenses import DayFinancialInputs, daily_expenses
from vrufleet.historical.timeseries import filter_window, validate_window
from vrufleet.repository.store import AssetExtendedRecord, AssetRepository

logger = logging.getLogger("vrufleet.fleet")

BASELINE_FLEET: Tuple[str, ...] = (
    "VRU-A03", "VRU-WAS", "VRU-RAF", "VRU-KS3", "VRU-KRA", "VRU-KFR",
    "VRU-THM", "VRU-ZDY", "VRU-MZN", "VRU-A02", "VRU-LYN", "VRU-BAH-01",
)


@dataclass(frozen=True)
class FleetAggregateRow:
    date: str
    recovered_liters: float
    revenue: float   # base currency
    expenses: float  # base currency
    profit: float


class FleetAggregator:
    """Per-date fleet financials normalized into the base currency.

    Only the whole-repository query shape (no explicit ids) is cached;
    subset queries are always computed fresh and never touch the cache.
    """

    def __init__(self, repository: AssetRepository, baseline: Iterable[str] = BASELINE_FLEET):
        self.repository = repository
        self.baseline = tuple(baseline)
        self._cache: Dict[str, List[FleetAggregateRow]] = {}
        self._cache_generation = -1

    @property
    def is_dirty(self) -> bool:
        return self._cache_generation != self.repository.generation

    def aggregate(self, window: str = "2025", fleet_ids: Optional[Iterable[str]] = None) -> List[FleetAggregateRow]:
        window = validate_window(window)
        repo = self.repository
        with repo.lock:
            if isinstance(fleet_ids, str):
                fleet_ids = [fleet_ids]
            if fleet_ids is not None:
                # set() so a repeated id is counted once
                targets = [repo.get(asset_id) for asset_id in sorted(set(fleet_ids))]
                return compute_rows(targets, window)

            if len(repo) == 0:
                for asset_id in self.baseline:
                    repo.get(asset_id)

            if self.is_dirty:
                self._cache.clear()
                self._cache_generation = repo.generation
            cached = self._cache.get(window)
            if cached is not None:
                logger.debug("Fleet cache hit for window=%s", window)
                return list(cached)

            rows = compute_rows(repo.records(), window)
            self._cache[window] = rows
            logger.info("Fleet aggregate recomputed for window=%s (%d assets, %d days)", window, len(repo), len(rows))
            return list(rows)

    def invalidate(self) -> None:
        self._cache.clear()
        self._cache_generation = -1


def compute_rows(records: Iterable[AssetExtendedRecord], window: str) -> List[FleetAggregateRow]:
    """Fold every asset's daily rows into per-date base-currency totals.

    Revenue and expenses are normalized per asset before summation.
    """
    totals: Dict[str, Dict[str, float]] = {}
    for rec in records:
        cfg = rec.config
        rate = quote_to_base(cfg.currency).rate
        for day in filter_window(rec.daily, window):
            t = totals.setdefault(day.date, {"liters": 0.0, "revenue": 0.0, "expenses": 0.0})
            revenue_local = day.sales_amount
            expenses_local = daily_expenses(DayFinancialInputs(
                revenue=revenue_local,
                recovered_liters=day.recovered_liters,
                vat_rate=cfg.vat_rate,
                kw_per_liter=cfg.electricity_kw_per_liter,
                cost_per_kw=cfg.electricity_cost_per_kw,
            ))
            t["liters"] += day.recovered_liters
            t["revenue"] += revenue_local * rate
            t["expenses"] += expenses_local * rate

    return [
        FleetAggregateRow(
            date=d,
            recovered_liters=t["liters"],
            revenue=t["revenue"],
            expenses=t["expenses"],
            profit=t["revenue"] - t["expenses"],
        )
        for d, t in sorted(totals.items())
    ]
