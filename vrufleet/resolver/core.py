from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from vrufleet.currency.rates import is_supported, TO_BASE_RATES


@dataclass(frozen=True)
class StationConfig:
    price_per_liter: float
    currency: str
    target_daily_yield: float
    vat_rate: float
    electricity_kw_per_liter: float
    electricity_cost_per_kw: float


class AssetClass(str, Enum):
    PRIMARY = "primary"          # Sasco VRU fleet
    REGIONAL = "regional"        # Bahrain special case
    PARTNER = "partner"          # GECO units, USD normalized
    UNCLASSIFIED = "unclassified"


KW_PER_LITER = 0.0952

DEFAULT_CONFIG = StationConfig(
    price_per_liter=2.18,
    currency="SAR",
    target_daily_yield=600,
    vat_rate=0.15,
    electricity_kw_per_liter=KW_PER_LITER,
    electricity_cost_per_kw=0.32,
)

CONFIG_BY_CLASS: Dict[AssetClass, StationConfig] = {
    AssetClass.PRIMARY: DEFAULT_CONFIG,
    AssetClass.UNCLASSIFIED: DEFAULT_CONFIG,
    AssetClass.REGIONAL: StationConfig(
        price_per_liter=0.140,
        currency="BHD",
        target_daily_yield=450,
        vat_rate=0.10,
        electricity_kw_per_liter=KW_PER_LITER,
        electricity_cost_per_kw=0.016,
    ),
    AssetClass.PARTNER: StationConfig(
        price_per_liter=1.0,
        currency="USD",
        target_daily_yield=100,
        vat_rate=0.10,
        electricity_kw_per_liter=KW_PER_LITER,
        electricity_cost_per_kw=0.12,
    ),
}

REGIONAL_ASSET_ID = "VRU-BAH-01"
PARTNER_ASSET_IDS: Tuple[str, ...] = ("SEOIL-01", "GECO452", "HUYNDAIPULAS001", "GECO-OMAN-01")
PRIMARY_PREFIX = "VRU-"


@dataclass(frozen=True)
class ClassRule:
    name: str
    matches: Callable[[str], bool]
    asset_class: AssetClass


# Evaluated in order; a later match overrides an earlier one, so the
# primary-fleet enforcement rule always has the last word for VRU- ids.
RULES: Tuple[ClassRule, ...] = (
    ClassRule("default", lambda i: True, AssetClass.UNCLASSIFIED),
    ClassRule("regional", lambda i: i == REGIONAL_ASSET_ID, AssetClass.REGIONAL),
    ClassRule("partner", lambda i: i in PARTNER_ASSET_IDS or i.startswith("GECO"), AssetClass.PARTNER),
    ClassRule(
        "primary_enforcement",
        lambda i: i.startswith(PRIMARY_PREFIX) and i != REGIONAL_ASSET_ID,
        AssetClass.PRIMARY,
    ),
)


def classify(asset_id: str) -> AssetClass:
    """Infer the asset class from the id naming convention."""
    cls = AssetClass.UNCLASSIFIED
    for rule in RULES:
        if rule.matches(asset_id):
            cls = rule.asset_class
    return cls


def resolve(asset_id: str, asset_class: Optional[AssetClass] = None) -> StationConfig:
    """Return the effective StationConfig for an asset.

    An explicit ``asset_class`` (set at fleet registration) bypasses the id
    naming rules entirely.
    """
    cls = AssetClass(asset_class) if asset_class is not None else classify(asset_id)
    return CONFIG_BY_CLASS[cls]


# camelCase names used by the dashboard settings panel
ALIASES = {
    "salesPricePerLiter": "price_per_liter",
    "pricePerLiter": "price_per_liter",
    "currency": "currency",
    "targetDailyYield": "target_daily_yield",
    "vatRate": "vat_rate",
    "electricityConsumptionKwPerL": "electricity_kw_per_liter",
    "electricityKwPerLiter": "electricity_kw_per_liter",
    "electricityCostPerKw": "electricity_cost_per_kw",
}

_FIELDS: List[str] = [f.name for f in fields(StationConfig)]
_NON_NEGATIVE = ("price_per_liter", "target_daily_yield", "electricity_kw_per_liter", "electricity_cost_per_kw")


def normalize_config_patch(patch: Dict[str, Any]) -> Dict[str, Any]:
    """Map aliased keys to StationConfig fields and validate values.

    Raises ValueError on unknown fields or out-of-range values.
    """
    out: Dict[str, Any] = {}
    for k, v in (patch or {}).items():
        name = ALIASES.get(k, k)
        if name not in _FIELDS:
            raise ValueError(f"Unknown config field '{k}'")
        out[name] = v

    for name in _NON_NEGATIVE:
        if name in out:
            try:
                out[name] = float(out[name])
            except (TypeError, ValueError):
                raise ValueError(f"{name} must be a number")
            if out[name] < 0:
                raise ValueError(f"{name} must be >= 0")
    if "vat_rate" in out:
        try:
            out["vat_rate"] = float(out["vat_rate"])
        except (TypeError, ValueError):
            raise ValueError("vat_rate must be a number")
        if not (0.0 <= out["vat_rate"] < 1.0):
            raise ValueError("vat_rate must be between 0 and 1")
    if "currency" in out:
        code = str(out["currency"]).upper()
        if not is_supported(code):
            raise ValueError(f"Unsupported currency '{out['currency']}'. Valid: {sorted(TO_BASE_RATES)}")
        out["currency"] = code
    return out
