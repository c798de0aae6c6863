from __future__ import annotations

import argparse
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from katana.catalog import Catalog
from katana.config import AppConfig
from katana.rpc import RpcConnector
from terminal import commands
from terminal.formatters import Palette

COMMANDS = ("balance", "yields", "portfolio", "info")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="katana-cli", description="DeFi Operations on Katana L2"
    )
    sub = parser.add_subparsers(dest="command")

    p_balance = sub.add_parser("balance", help="Show token balances")
    p_balance.add_argument("--wallet", help="Wallet address (default: KATANA_WALLET)")
    p_balance.add_argument("--token", help="Show a single token's balance")

    p_yields = sub.add_parser("yields", help="List yield opportunities")
    p_yields.add_argument("--min-apy", type=float, default=None, help="Minimum APY filter (percent)")

    p_portfolio = sub.add_parser("portfolio", help="Full position overview")
    p_portfolio.add_argument("--wallet", help="Wallet address (default: KATANA_WALLET)")

    sub.add_parser("info", help="Network identity and connectivity")
    return parser


def dispatch(
    argv: Sequence[str],
    config: AppConfig,
    catalog: Catalog,
    connector: RpcConnector,
    parser: Optional[argparse.ArgumentParser] = None,
) -> Tuple[int, str]:
    """
    Run one CLI command and return ``(exit_code, text)``.

    Absent or unknown commands return the usage text. Malformed options make
    argparse exit with status 2.
    """
    args_list: List[str] = list(argv or [])
    if not args_list or args_list[0] not in COMMANDS:
        return 0, commands.usage()

    args = (parser or build_parser()).parse_args(args_list)
    palette = Palette(enabled=config.color)

    def _wallet() -> str:
        return (getattr(args, "wallet", None) or config.wallet_address or "").strip()

    handlers: Dict[str, Callable[[], str]] = {
        "balance": lambda: commands.balance(
            connector, catalog, _wallet(), token=args.token,
            palette=palette, max_workers=config.max_workers,
        ),
        "yields": lambda: commands.yields(catalog, min_apy=args.min_apy, palette=palette),
        "portfolio": lambda: commands.portfolio(
            connector, catalog, _wallet(), palette=palette, max_workers=config.max_workers,
        ),
        "info": lambda: commands.info(connector, catalog, config, palette=palette),
    }
    return 0, handlers[args.command]()
