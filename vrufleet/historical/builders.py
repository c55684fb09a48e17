from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from math import pi, sin
from typing import List, Optional
import logging
import random

from vrufleet.historical.catalog import MONTHS, CuratedCatalog, CuratedProfile, SyntheticProfile, days_in_month
from vrufleet.historical.timeseries import DailyRecord, HourlyRecord
from vrufleet.resolver.core import StationConfig

logger = logging.getLogger("vrufleet.builders")

PENDING_PREFIX = "VRU-P"
PLACEHOLDER_DATE = "2024-01-01"
PLACEHOLDER_HOURLY_FLOW = 10.0

REASON_IDLE = "System Idle / Offline"
REASON_MAINTENANCE = "Maintenance"
REASON_PRE_INSTALL = "Pre-Installation"
REASON_PENDING = "Pending Installation"

OFFLINE_STATUSES = {"Offline", "Stopped"}
PRE_INSTALL_STATUS = "Pending_Install"


@dataclass(frozen=True)
class BuiltSeries:
    strategy: str  # curated|synthetic|pre_installation|placeholder
    daily: List[DailyRecord]
    hourly: List[HourlyRecord]


class RecordBuilder:
    """
    Builds an asset's daily + hourly series.

    Daily strategy is picked by asset identity: pending ids and unknown ids
    get a one-row placeholder, catalogued ids get their curated history, and
    synthetic/pre-installation ids get a generated day-by-day series between
    ``synthetic_start`` and ``cutoff``. Hourly data is always synthetic.
    """

    def __init__(self, catalog: CuratedCatalog, cutoff: str, synthetic_start: str = "2025-01-01"):
        self.catalog = catalog
        self.cutoff = cutoff
        self.synthetic_start = synthetic_start

    def build(
        self,
        asset_id: str,
        config: StationConfig,
        base_temperature: Optional[float] = None,
        status: Optional[str] = None,
        rng: Optional[random.Random] = None,
        now: Optional[datetime] = None,
    ) -> BuiltSeries:
        r = rng or random.Random()
        offline = status in OFFLINE_STATUSES

        if asset_id.startswith(PENDING_PREFIX):
            temp = 25.0 if base_temperature is None else base_temperature
            return BuiltSeries(
                "placeholder",
                self.build_placeholder(),
                generate_hourly(temp, 0, offline=True, rng=r, now=now),
            )

        curated = self.catalog.curated_profile(asset_id)
        if curated is not None:
            temp = curated.base_temperature if base_temperature is None else base_temperature
            daily = self.build_curated(config, curated, r)
            hourly = generate_hourly(temp, curated.hourly_flow, offline=curated.offline or offline, rng=r, now=now)
            return BuiltSeries("curated", daily, hourly)

        synthetic = self.catalog.synthetic_profile(asset_id)
        if synthetic is None and status == PRE_INSTALL_STATUS:
            synthetic = SyntheticProfile(asset_id, 25.0 if base_temperature is None else base_temperature, pre_installation=True)
        if synthetic is not None:
            temp = synthetic.base_temperature if base_temperature is None else base_temperature
            pre = synthetic.pre_installation or status == PRE_INSTALL_STATUS
            daily = self.build_synthetic(config, synthetic.base_temperature, synthetic.avg_daily_liters, pre, r)
            hourly = generate_hourly(
                temp, 0 if pre else synthetic.avg_daily_liters / 24.0, offline=pre or offline, rng=r, now=now
            )
            return BuiltSeries("pre_installation" if pre else "synthetic", daily, hourly)

        temp = 25.0 if base_temperature is None else base_temperature
        return BuiltSeries(
            "placeholder",
            self.build_placeholder(),
            generate_hourly(temp, PLACEHOLDER_HOURLY_FLOW, offline=offline, rng=r, now=now),
        )

    def build_curated(self, config: StationConfig, profile: CuratedProfile, rng: random.Random) -> List[DailyRecord]:
        table = profile.daily_table(rng)
        out: List[DailyRecord] = []
        seen: set[str] = set()
        for year in sorted(table):
            year_data = table[year]
            for month in MONTHS:
                vols = year_data.get(month)
                if vols is None:
                    continue
                for i in range(days_in_month(year, month)):
                    vol = vols[i] if i < len(vols) else 0
                    d = f"{year}-{month}-{i + 1:02d}"
                    if d > self.cutoff:
                        continue
                    if d in seen:
                        logger.warning("Duplicate date %s skipped for %s", d, profile.asset_id)
                        continue
                    seen.add(d)
                    out.append(DailyRecord(
                        date=d,
                        recovered_liters=vol,
                        avg_temperature_c=round(profile.base_temperature + rng.uniform(-1.5, 1.5), 1),
                        sales_amount=vol * config.price_per_liter,
                        efficiency=round(rng.uniform(0.90, 0.99), 2) if vol > 0 else 0.0,
                        outage_reason=REASON_IDLE if vol == 0 else None,
                    ))
        return out

    def build_synthetic(
        self,
        config: StationConfig,
        base_temperature: float,
        avg_daily_liters: float,
        pre_installation: bool,
        rng: random.Random,
    ) -> List[DailyRecord]:
        out: List[DailyRecord] = []
        day = date.fromisoformat(self.synthetic_start)
        end = date.fromisoformat(self.cutoff)
        while day <= end:
            temp = round(base_temperature + rng.uniform(-2, 2), 1)
            if pre_installation:
                out.append(DailyRecord(day.isoformat(), 0, temp, 0.0, 0.0, REASON_PRE_INSTALL))
            else:
                variance = avg_daily_liters * 0.3
                vol = max(0, int(avg_daily_liters + rng.uniform(-variance, variance)))
                out.append(DailyRecord(
                    date=day.isoformat(),
                    recovered_liters=vol,
                    avg_temperature_c=temp,
                    sales_amount=vol * config.price_per_liter,
                    efficiency=0.95 if vol > 0 else 0.0,
                    outage_reason=REASON_MAINTENANCE if vol == 0 else None,
                ))
            day += timedelta(days=1)
        return out

    def build_placeholder(self) -> List[DailyRecord]:
        # never dated after the cutoff
        return [DailyRecord(min(PLACEHOLDER_DATE, self.cutoff), 0, 0.0, 0.0, 0.0, REASON_PENDING)]


def flow_multiplier(hour: int) -> float:
    # night base, day base, then two rush-hour peaks
    if 6 <= hour <= 22:
        if 8 <= hour <= 11 or 17 <= hour <= 20:
            return 1.1
        return 0.8
    return 0.3


def generate_hourly(
    base_temp: float,
    target_flow_per_hour: float,
    offline: bool = False,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> List[HourlyRecord]:
    """Rolling hourly window ending at the current hour.

    49 points when running, 25 all-zero points when offline.
    """
    r = rng or random.Random()
    end = (now or datetime.now(timezone.utc)).replace(minute=0, second=0, microsecond=0)
    points: List[HourlyRecord] = []

    if offline:
        for i in range(24, -1, -1):
            ts = end - timedelta(hours=i)
            points.append(HourlyRecord(ts.isoformat(), 0.0, base_temp, 0.0, 0.0))
        return points

    for i in range(48, -1, -1):
        ts = end - timedelta(hours=i)
        hour = ts.hour
        # coolest around 04:00, warmest in the afternoon
        temp_mod = sin((hour - 4) / 24 * 2 * pi) * 5
        liters = 0.0
        if target_flow_per_hour > 0:
            variance = target_flow_per_hour * 0.2
            liters = max(0.0, target_flow_per_hour * flow_multiplier(hour) + r.uniform(-variance, variance))
            if r.random() > 0.95:
                liters = 0.0  # pump idle
        points.append(HourlyRecord(
            timestamp=ts.isoformat(),
            recovered_liters=round(liters, 1),
            temperature_c=round(base_temp + temp_mod + r.uniform(-1, 1), 1),
            pressure_psi=round(12 + r.random() * 2, 2) if liters > 0 else 0.0,
            efficiency=round(0.92 + r.random() * 0.07, 2) if liters > 0 else 0.0,
        ))
    return points
