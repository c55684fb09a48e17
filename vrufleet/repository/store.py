from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional
import logging
import random
import threading

from vrufleet.config.env import RepositoryConfig, get_repository_config
from vrufleet.historical.builders import RecordBuilder
from vrufleet.historical.catalog import CuratedCatalog
from vrufleet.historical.timeseries import DailyRecord, HourlyRecord, MonthlyRecord, aggregate_monthly
from vrufleet.resolver.core import AssetClass, StationConfig, normalize_config_patch, resolve

logger = logging.getLogger("vrufleet.repository")


@dataclass
class AssetExtendedRecord:
    id: str
    config: StationConfig
    hourly: List[HourlyRecord] = field(default_factory=list)
    daily: List[DailyRecord] = field(default_factory=list)
    monthly: List[MonthlyRecord] = field(default_factory=list)
    strategy: str = "placeholder"


@dataclass(frozen=True)
class FleetMember:
    id: str
    status: Optional[str] = None  # Running|Stopped|Maintenance|Pending_Install|Offline
    temperature_c: Optional[float] = None
    asset_class: Optional[AssetClass] = None


class AssetRepository:
    """In-memory store of extended asset records.

    Records are built lazily on first `get` and memoized for the process
    lifetime. Every create/update bumps `generation`, which is how dependent
    caches detect they are dirty.
    """

    def __init__(
        self,
        config: Optional[RepositoryConfig] = None,
        catalog: Optional[CuratedCatalog] = None,
    ):
        self.config = config or get_repository_config()
        self.catalog = catalog or CuratedCatalog.from_json_path(self.config.catalog_path)
        self.builder = RecordBuilder(self.catalog, self.config.cutoff_date, self.config.synthetic_start)
        self.lock = threading.RLock()
        self._records: Dict[str, AssetExtendedRecord] = {}
        self._members: Dict[str, FleetMember] = {}
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def cutoff(self) -> str:
        return self.config.cutoff_date

    def __contains__(self, asset_id: str) -> bool:
        with self.lock:
            return asset_id in self._records

    def __len__(self) -> int:
        with self.lock:
            return len(self._records)

    def ids(self) -> List[str]:
        with self.lock:
            return list(self._records)

    def records(self) -> List[AssetExtendedRecord]:
        with self.lock:
            return list(self._records.values())

    def register(self, members: Iterable[FleetMember]) -> None:
        """Record fleet membership (status, temperature, explicit class).

        Only affects assets built after registration.
        """
        with self.lock:
            for m in members:
                self._members[m.id] = m

    def member(self, asset_id: str) -> Optional[FleetMember]:
        with self.lock:
            return self._members.get(asset_id)

    def _rng(self, asset_id: str) -> random.Random:
        if self.config.seed is None:
            return random.Random()
        return random.Random(f"{self.config.seed}:{asset_id}")

    def get(self, asset_id: str, base_temperature: Optional[float] = None) -> AssetExtendedRecord:
        with self.lock:
            rec = self._records.get(asset_id)
            if rec is not None:
                return rec

            member = self._members.get(asset_id)
            if base_temperature is None and member is not None:
                base_temperature = member.temperature_c
            cfg = resolve(asset_id, member.asset_class if member else None)
            built = self.builder.build(
                asset_id,
                cfg,
                base_temperature=base_temperature,
                status=member.status if member else None,
                rng=self._rng(asset_id),
            )
            rec = AssetExtendedRecord(
                id=asset_id,
                config=cfg,
                hourly=built.hourly,
                daily=built.daily,
                monthly=aggregate_monthly(built.daily),
                strategy=built.strategy,
            )
            self._records[asset_id] = rec
            self._generation += 1
            logger.info("Built %s (%s): %d daily rows, %s", asset_id, built.strategy, len(rec.daily), cfg.currency)
            return rec

    def update(self, asset_id: str, patch: Dict[str, Any]) -> AssetExtendedRecord:
        """Merge a partial config and recompute every derived money field.

        daily/monthly are replaced with new lists; references taken before
        the update keep their old values.
        """
        changes = normalize_config_patch(patch)
        with self.lock:
            rec = self.get(asset_id)
            rec.config = replace(rec.config, **changes)
            price = rec.config.price_per_liter
            rec.daily = [replace(d, sales_amount=d.recovered_liters * price) for d in rec.daily]
            rec.monthly = aggregate_monthly(rec.daily)
            self._generation += 1
            logger.info("Updated %s config: %s", asset_id, sorted(changes))
            return rec

    def reset(self) -> None:
        with self.lock:
            self._records.clear()
            self._members.clear()
            self._generation += 1
