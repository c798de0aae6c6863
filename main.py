#!/usr/bin/env python3
"""Entry point for the Katana CLI.

Import-time side effects are kept to a minimum so the module can be imported
in unit tests. Boot (dotenv, logging, config) happens inside :func:`main`.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from katana.catalog import load_catalog
from katana.config import AppConfig, load_config
from katana.rpc import RpcConnector
from terminal.dispatcher import dispatch

logger = logging.getLogger("katana-cli.main")


def app_boot() -> AppConfig:
    """Load .env, configure logging and return the active config."""

    try:
        load_dotenv(find_dotenv(usecwd=True))
    except OSError:  # pragma: no cover - unreadable .env
        logger.debug("dotenv load failed", exc_info=True)

    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logger.debug("Katana CLI booting (rpc=%s)", ", ".join(config.rpc_candidates()))
    return config


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point: boot, dispatch one command, print its output."""

    config = app_boot()
    catalog = load_catalog(config)
    args = sys.argv[1:] if argv is None else argv

    with RpcConnector(config.rpc_candidates(), timeout=config.rpc_timeout) as connector:
        try:
            code, text = dispatch(args, config, catalog, connector)
        except Exception:
            logger.exception("Command failed")
            return 1

    print(text)
    return code


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(main())
