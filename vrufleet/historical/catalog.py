from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
import calendar
import json
import random
from pathlib import Path

from vrufleet.historical.timeseries import distribute

MONTHS = ("01", "02", "03", "04", "05", "06", "07", "08", "09", "10", "11", "12")

# A month entry is either a monthly total (distributed over the month at
# load time) or an explicit list of daily values.
MonthEntry = Union[int, float, List[float]]


@dataclass(frozen=True)
class CuratedProfile:
    asset_id: str
    base_temperature: float
    hourly_flow: float
    offline: bool
    years: Dict[str, Dict[str, MonthEntry]]

    def daily_table(self, rng: Optional[random.Random] = None) -> Dict[str, Dict[str, List[float]]]:
        """Materialize year -> month -> daily values.

        Totals are expanded with `distribute` so each month sums to exactly
        the curated figure.
        """
        out: Dict[str, Dict[str, List[float]]] = {}
        for year in sorted(self.years):
            months: Dict[str, List[float]] = {}
            for month, entry in self.years[year].items():
                if isinstance(entry, list):
                    months[month] = [float(v) for v in entry]
                else:
                    months[month] = distribute(entry, days_in_month(year, month), rng)
            out[year] = months
        return out


@dataclass(frozen=True)
class SyntheticProfile:
    asset_id: str
    base_temperature: float
    avg_daily_liters: float = 0.0
    pre_installation: bool = False


@dataclass
class CuratedCatalog:
    curated: Dict[str, CuratedProfile] = field(default_factory=dict)
    synthetic: Dict[str, SyntheticProfile] = field(default_factory=dict)
    version: str = "0"

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "CuratedCatalog":
        for aid, p in data.get("curated", {}).items():
            for y, ms in p.get("years", {}).items():
                for m, entry in ms.items():
                    validate_month_entry(entry, f"{aid} {y}-{m}")
        curated = {
            aid: CuratedProfile(
                asset_id=aid,
                base_temperature=float(p.get("base_temperature", 25)),
                hourly_flow=float(p.get("hourly_flow", 0)),
                offline=bool(p.get("offline", False)),
                years={str(y): {str(m).zfill(2): v for m, v in ms.items()} for y, ms in p.get("years", {}).items()},
            )
            for aid, p in data.get("curated", {}).items()
        }
        synthetic: Dict[str, SyntheticProfile] = {}
        for aid, p in data.get("synthetic", {}).items():
            synthetic[aid] = SyntheticProfile(
                asset_id=aid,
                base_temperature=float(p.get("base_temperature", 25)),
                avg_daily_liters=float(p.get("avg_daily_liters", 0)),
            )
        # pre-installation entries override synthetic ones for the same id
        for aid, p in data.get("pre_installation", {}).items():
            synthetic[aid] = SyntheticProfile(
                asset_id=aid,
                base_temperature=float(p.get("base_temperature", 25)),
                pre_installation=True,
            )
        return CuratedCatalog(curated=curated, synthetic=synthetic, version=str(data.get("version", "0")))

    @staticmethod
    def from_json_path(path: str | Path) -> "CuratedCatalog":
        return CuratedCatalog.from_dict(json.loads(Path(path).read_text()))

    def curated_profile(self, asset_id: str) -> Optional[CuratedProfile]:
        return self.curated.get(asset_id)

    def synthetic_profile(self, asset_id: str) -> Optional[SyntheticProfile]:
        return self.synthetic.get(asset_id)


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def validate_month_entry(entry: Any, where: str) -> None:
    """Raise ValueError unless ``entry`` is a non-negative total or a list
    of non-negative daily values."""
    values = entry if isinstance(entry, list) else [entry]
    for v in values:
        if not _is_number(v):
            raise ValueError(f"{where}: volume must be a number, got {v!r}")
        if v < 0:
            raise ValueError(f"{where}: volume must be >= 0, got {v}")


def days_in_month(year: str, month: str) -> int:
    return calendar.monthrange(int(year), int(month))[1]
