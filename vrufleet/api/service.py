from __future__ import annotations
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Optional

from vrufleet.exports.reports import fleet_summary_md, validation_report_md
from vrufleet.forecasting.assumptions import Scenario
from vrufleet.forecasting.engine import project_months
from vrufleet.historical.kpi import environmental_impact, fleet_totals
from vrufleet.historical.timeseries import validate_daily_series
from vrufleet.repository.fleet import FleetAggregateRow, FleetAggregator
from vrufleet.repository.store import AssetExtendedRecord, AssetRepository, FleetMember


REPOSITORY = AssetRepository()
AGGREGATOR = FleetAggregator(REPOSITORY)


def get_asset_data(asset_id: str) -> AssetExtendedRecord:
    return REPOSITORY.get(asset_id)


def update_asset_config(asset_id: str, patch: Dict[str, Any]) -> AssetExtendedRecord:
    return REPOSITORY.update(asset_id, patch)


def get_fleet_aggregate(window: str = "2025", fleet_ids: Optional[Iterable[str]] = None) -> List[FleetAggregateRow]:
    return AGGREGATOR.aggregate(window, fleet_ids)


def register_fleet(members: Iterable[FleetMember]) -> None:
    REPOSITORY.register(members)


def get_fleet_summary(window: str = "2025", fleet_ids: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    fleet_ids = list(fleet_ids) if fleet_ids is not None else None
    rows = get_fleet_aggregate(window, fleet_ids)
    totals = fleet_totals(rows)
    impact = environmental_impact(totals["recovered_liters"])

    ids = sorted(set(fleet_ids)) if fleet_ids is not None else sorted(REPOSITORY.ids())
    checks = {}
    for asset_id in ids:
        rec = REPOSITORY.get(asset_id)
        checks[asset_id] = validate_daily_series(rec.daily, REPOSITORY.cutoff, rec.config.price_per_liter)

    return {
        "window": window,
        "currency": REPOSITORY.config.base_currency,
        "totals": totals,
        "environmental": impact,
        "checks": checks,
        "report": fleet_summary_md(window, totals, impact, currency=REPOSITORY.config.base_currency),
        "validation_report": validation_report_md(checks, details={"cutoff": REPOSITORY.cutoff, "assets": len(ids)}),
    }


def get_fleet_projection(
    window: str = "2025",
    fleet_ids: Optional[Iterable[str]] = None,
    scenario: Optional[Scenario] = None,
) -> Dict[str, Any]:
    scenario = scenario or Scenario()
    rows = project_months(get_fleet_aggregate(window, fleet_ids), scenario)
    return {
        "window": window,
        "scenario": asdict(scenario),
        "months": rows,
        "total_projected_revenue": sum(r["projected_revenue"] for r in rows),
    }
