from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from katana.catalog import Catalog
from katana.config import AppConfig
from katana.holdings import (
    DEFAULT_MAX_WORKERS,
    BalanceRecord,
    NativeBalanceError,
    TokenQueryError,
    aggregate_balances,
    fetch_token_balance,
    total_value,
)
from katana.rpc import RpcConnectionError, RpcConnector
from katana.tokens import find_token
from katana.yields import filter_yields, placeholder_wallet_value, summarize_portfolio
from terminal.formatters import (
    PLAIN,
    Palette,
    format_balances,
    format_info,
    format_placeholder_holdings,
    format_positions,
    format_summary,
    format_token_balance,
    format_usage,
    format_yields,
)

log = logging.getLogger(__name__)

NO_WALLET = "No wallet configured. Set KATANA_WALLET env var."


# ---------- helpers ----------


def _live_balances(
    connector: RpcConnector, catalog: Catalog, wallet: str, max_workers: int
) -> Tuple[Optional[List[BalanceRecord]], Optional[str]]:
    """Return (records, None) on success or (None, error text) on connection/native failure."""
    try:
        connection = connector.connect()
        records = aggregate_balances(
            connection, wallet, catalog.tokens, catalog.prices, max_workers=max_workers
        )
    except (RpcConnectionError, NativeBalanceError) as exc:
        log.warning("Live balances unavailable: %s", exc)
        return None, str(exc)
    return records, None


def _fallback(catalog: Catalog, error: str, palette: Palette) -> str:
    return "\n".join([
        palette.red(f"Error fetching balances: {error}"),
        "",
        format_placeholder_holdings(catalog.placeholder_holdings, palette),
    ])


# ---------- high-level command strings ----------


def balance(
    connector: RpcConnector,
    catalog: Catalog,
    wallet: str,
    token: Optional[str] = None,
    palette: Palette = PLAIN,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> str:
    """Holdings of ``wallet`` (or one token's holding when ``token`` is given)."""
    if not wallet:
        return palette.yellow(NO_WALLET)

    if token:
        descriptor = find_token(catalog.tokens, token)
        if descriptor is None:
            return palette.red(f"Token {token} not found")
        try:
            record = fetch_token_balance(connector.connect(), wallet, descriptor, catalog.prices)
        except (RpcConnectionError, TokenQueryError) as exc:
            log.warning("Token balance unavailable: %s", exc)
            return _fallback(catalog, str(exc), palette)
        return format_token_balance(record, palette)

    records, error = _live_balances(connector, catalog, wallet, max_workers)
    if records is None:
        return _fallback(catalog, error or "unknown error", palette)
    return format_balances(records, palette)


def yields(catalog: Catalog, min_apy: Optional[float] = None, palette: Palette = PLAIN) -> str:
    return format_yields(filter_yields(catalog.yields, min_apy), palette)


def portfolio(
    connector: RpcConnector,
    catalog: Catalog,
    wallet: str,
    palette: Palette = PLAIN,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> str:
    """
    Holdings plus placeholder positions and summary.
    Wallet value comes from live balances when available, else the placeholder holdings.
    """
    lines = [palette.cyan("⚔️  Katana Portfolio Overview"), ""]
    if not wallet:
        lines.append(palette.yellow(NO_WALLET))
        return "\n".join(lines)

    lines.append("📊 Wallet Holdings")
    records, error = _live_balances(connector, catalog, wallet, max_workers)
    if records is None:
        lines.append(_fallback(catalog, error or "unknown error", palette))
        wallet_value = placeholder_wallet_value(catalog.placeholder_holdings)
    else:
        lines.append(format_balances(records, palette))
        wallet_value = total_value(records)

    lines.append("")
    lines.append(format_positions(catalog.positions, palette))
    lines.append("")
    lines.append(format_summary(summarize_portfolio(wallet_value, catalog.positions), palette))
    return "\n".join(lines)


def info(
    connector: RpcConnector, catalog: Catalog, config: AppConfig, palette: Palette = PLAIN
) -> str:
    """Network identity and reachability; never raises for an unreachable node."""
    tokens = [t.symbol for t in catalog.tokens]
    pools = [f"{p.key} ({p.name})" for p in catalog.pools]
    try:
        connection = connector.connect()
        chain_id = connection.chain_id()
        block = connection.block_number()
    except Exception as exc:
        log.warning("RPC info unavailable: %s", exc)
        endpoints = ", ".join(config.rpc_candidates()) or None
        return format_info(
            catalog.network_name, endpoints, None, None, error=str(exc),
            palette=palette, tokens=tokens, pools=pools,
        )
    return format_info(
        catalog.network_name, connection.url, chain_id, block,
        palette=palette, tokens=tokens, pools=pools,
    )


def usage() -> str:
    return format_usage()
