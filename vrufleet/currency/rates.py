"""
Static exchange rates into the base currency (SAR).
Rates are conversion factors only; station prices live in StationConfig.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict

BASE_CURRENCY = "SAR"

TO_BASE_RATES: Dict[str, float] = {
    "SAR": 1.0,
    "USD": 3.75,
    "BHD": 9.95,
    "KRW": 0.0027,
    "CNY": 0.52,
}


@dataclass(frozen=True)
class FXQuote:
    base: str
    quote: str
    rate: float  # 1 unit of quote == rate units of base


def is_supported(currency: str) -> bool:
    return str(currency).upper() in TO_BASE_RATES


def quote_to_base(currency: str) -> FXQuote:
    code = str(currency).upper()
    if code not in TO_BASE_RATES:
        raise ValueError(f"Unsupported currency '{currency}'. Valid: {sorted(TO_BASE_RATES)}")
    return FXQuote(base=BASE_CURRENCY, quote=code, rate=TO_BASE_RATES[code])


def to_base(amount: float, currency: str) -> float:
    return float(amount) * quote_to_base(currency).rate


def convert(amount: float, from_currency: str, to_currency: str) -> float:
    """Convert through the base currency (from -> SAR -> to)."""
    base_amount = to_base(amount, from_currency)
    return base_amount / quote_to_base(to_currency).rate
