# -*- coding: utf-8 -*-
"""
katana/holdings.py: wallet balance aggregation.

Notes
-----
- No network side-effects at import time; callers pass an open Connection.
- The native balance is mandatory: its failure raises NativeBalanceError.
- Token balances are fetched concurrently and joined before valuation.
  A token whose query fails is dropped from the result (logged at DEBUG).
- Zero balances never produce a record.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Sequence

from katana.pricing import get_spot_usd
from katana.tokens import TokenDescriptor

log = logging.getLogger(__name__)

D = Decimal

DEFAULT_MAX_WORKERS = 8


class NativeBalanceError(Exception):
    """The native-asset query failed even though the endpoint is reachable."""


class TokenQueryError(Exception):
    """A single requested token balance could not be read."""


@dataclass(frozen=True)
class BalanceRecord:
    symbol: str
    name: str
    raw: int
    formatted: str
    amount: Decimal
    value_usd: Decimal


def to_amount(raw: int, decimals: int) -> Decimal:
    """Exact ``raw / 10**decimals``."""
    return D(int(raw)).scaleb(-int(decimals))


def format_units(raw: int, decimals: int, min_fraction: int = 2) -> str:
    """
    Render ``raw / 10**decimals`` without rounding.

    Trailing fractional zeros are stripped, keeping at least ``min_fraction``
    digits (never more than ``decimals``):

        format_units(2450000000000000000, 18) == "2.45"
        format_units(5230000000, 6) == "5230.00"
    """
    raw = int(raw)
    decimals = max(0, int(decimals))
    sign = "-" if raw < 0 else ""
    whole, frac = divmod(abs(raw), 10 ** decimals)
    if decimals == 0:
        return f"{sign}{whole}"
    frac_txt = str(frac).rjust(decimals, "0").rstrip("0")
    keep = min(max(0, min_fraction), decimals)
    frac_txt = frac_txt.ljust(keep, "0")
    if not frac_txt:
        return f"{sign}{whole}"
    return f"{sign}{whole}.{frac_txt}"


def _price_for(token: TokenDescriptor, prices: Mapping[str, Decimal]) -> Decimal:
    if token.price_usd is not None:
        return token.price_usd
    return get_spot_usd(token.symbol, prices)


def make_record(token: TokenDescriptor, raw: int, prices: Mapping[str, Decimal]) -> BalanceRecord:
    amount = to_amount(raw, token.decimals)
    return BalanceRecord(
        symbol=token.symbol,
        name=token.name,
        raw=raw,
        formatted=format_units(raw, token.decimals),
        amount=amount,
        value_usd=amount * _price_for(token, prices),
    )


def _query(connection, wallet: str, token: TokenDescriptor) -> int:
    if token.is_native:
        return connection.native_balance(wallet)
    return connection.token_balance(token.address, wallet)


def _fetch_token_balances(
    connection, wallet: str, tokens: Sequence[TokenDescriptor], max_workers: int
) -> Dict[int, int]:
    """Fan out balanceOf calls; returns {table index: raw} for the calls that succeeded."""
    results: Dict[int, int] = {}
    if not tokens:
        return results
    workers = max(1, min(int(max_workers or 1), len(tokens)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="balance") as executor:
        futures = {
            executor.submit(connection.token_balance, token.address, wallet): idx
            for idx, token in enumerate(tokens)
        }
        for future in as_completed(futures):
            idx = futures[future]
            try:
                results[idx] = future.result()
            except Exception as exc:
                log.debug("Skipping %s: %s", tokens[idx].symbol, exc)
    return results


def aggregate_balances(
    connection,
    wallet: str,
    tokens: Iterable[TokenDescriptor],
    prices: Mapping[str, Decimal],
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[BalanceRecord]:
    """
    Native balance plus every ERC-20 balance of ``wallet``, valued in USD.

    Returns non-zero holdings sorted by descending ``value_usd``; ties keep
    the order of ``tokens``.
    """
    tokens = list(tokens)
    natives = [t for t in tokens if t.is_native]
    contracts = [t for t in tokens if not t.is_native]

    raws: List[tuple[TokenDescriptor, int]] = []
    for token in natives:
        try:
            raw = connection.native_balance(wallet)
        except Exception as exc:
            raise NativeBalanceError(f"{token.symbol} balance query failed: {exc}") from exc
        raws.append((token, raw))

    fetched = _fetch_token_balances(connection, wallet, contracts, max_workers)
    for idx, token in enumerate(contracts):
        if idx in fetched:
            raws.append((token, fetched[idx]))

    order = {token: pos for pos, token in enumerate(tokens)}
    records = [
        (order[token], make_record(token, raw, prices))
        for token, raw in raws
        if raw > 0
    ]
    records.sort(key=lambda item: (-item[1].value_usd, item[0]))
    return [rec for _, rec in records]


def fetch_token_balance(
    connection, wallet: str, token: TokenDescriptor, prices: Mapping[str, Decimal]
) -> BalanceRecord:
    """Single-token lookup; zero balances are returned (``raw == 0``), failures raise."""
    try:
        raw = _query(connection, wallet, token)
    except Exception as exc:
        raise TokenQueryError(f"{token.symbol} balance query failed: {exc}") from exc
    return make_record(token, raw, prices)


def total_value(records: Iterable[BalanceRecord]) -> Decimal:
    return sum((r.value_usd for r in records), D("0"))
