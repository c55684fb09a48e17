from __future__ import annotations
from dataclasses import asdict, is_dataclass
from typing import List, Dict, Any, Iterable
import csv
import io

SCHEMAS = {
    "daily": [
        "date","recovered_liters","avg_temperature_c","sales_amount","efficiency","outage_reason"
    ],
    "monthly": [
        "month","recovered_liters","sales_amount","avg_temperature_c"
    ],
    "hourly": [
        "timestamp","recovered_liters","temperature_c","pressure_psi","efficiency"
    ],
    "fleet_aggregate": [
        "date","recovered_liters","revenue","expenses","profit"
    ],
    "projection": [
        "month","forecast","confidence_lower","confidence_upper","projected_revenue"
    ],
}


def _as_dict(row: Any) -> Dict[str, Any]:
    if is_dataclass(row):
        return asdict(row)
    return dict(row)


def write_csv(rows: Iterable[Any], columns: List[str]) -> str:
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
    w.writeheader()
    for r in rows:
        d = _as_dict(r)
        w.writerow({k: d.get(k) for k in columns})
    return buf.getvalue()


def write_daily(rows: Iterable[Any]) -> str:
    return write_csv(rows, SCHEMAS["daily"])


def write_monthly(rows: Iterable[Any]) -> str:
    return write_csv(rows, SCHEMAS["monthly"])


def write_hourly(rows: Iterable[Any]) -> str:
    return write_csv(rows, SCHEMAS["hourly"])


def write_fleet_aggregate(rows: Iterable[Any]) -> str:
    return write_csv(rows, SCHEMAS["fleet_aggregate"])


def write_projection(rows: Iterable[Any]) -> str:
    return write_csv(rows, SCHEMAS["projection"])
