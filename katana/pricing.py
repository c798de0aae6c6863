# -*- coding: utf-8 -*-
"""
katana/pricing.py: Static USD price estimates for balance valuation.

API used by katana/holdings.py:
- get_spot_usd(symbol: str, prices: Mapping[str, Decimal]) -> Decimal

Strategy:
1) Normalize wrappers (WETH -> ETH) when the wrapper has no entry of its own.
2) Look up the static table (overrides come from AppConfig.price_overrides).
3) Unknown symbols are priced at 0, never dropped.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Dict, Mapping, Optional

log = logging.getLogger(__name__)

DEFAULT_PRICES_USD: Mapping[str, Decimal] = MappingProxyType({
    "ETH": Decimal("2000"),
    "WETH": Decimal("2000"),
    "USDC": Decimal("1"),
    "USDT": Decimal("1"),
    "DAI": Decimal("1"),
})

_WRAPPERS = {"WETH": "ETH"}


def _to_decimal(x: object) -> Optional[Decimal]:
    if isinstance(x, Decimal):
        return x
    try:
        return Decimal(str(x).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None


def _norm_symbol(symbol: str) -> str:
    return (symbol or "").strip().upper() or "?"


def load_price_table(overrides: Optional[Mapping[str, object]] = None) -> Mapping[str, Decimal]:
    """Default table merged with numeric overrides; returns a read-only mapping."""
    table: Dict[str, Decimal] = dict(DEFAULT_PRICES_USD)
    for sym, value in (overrides or {}).items():
        price = _to_decimal(value)
        if price is None or not price.is_finite() or price < 0:
            log.warning("Ignoring invalid price override %s=%r", sym, value)
            continue
        table[_norm_symbol(sym)] = price
    return MappingProxyType(table)


def get_spot_usd(symbol: str, prices: Mapping[str, Decimal]) -> Decimal:
    sym = _norm_symbol(symbol)
    price = prices.get(sym)
    if price is None and sym in _WRAPPERS:
        price = prices.get(_WRAPPERS[sym])
    return price if price is not None else Decimal("0")
