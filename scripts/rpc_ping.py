#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Probe every configured Katana RPC endpoint and report block height or error."""
from __future__ import annotations

import argparse
import sys
from typing import Iterable, List

from dotenv import find_dotenv, load_dotenv

from katana.config import load_config
from katana.rpc import RpcConnector


def _print_ok(url: str, height: int) -> None:
    print(f"[OK]    {url} -> block {height}")


def _print_fail(url: str, err: Exception) -> None:
    print(f"[FAIL]  {url} -> {type(err).__name__}: {err}")


def _iter_targets(configured: Iterable[str], extra: Iterable[str]) -> Iterable[str]:
    seen = set()
    for item in list(configured) + list(extra):
        if item and item not in seen:
            seen.add(item)
            yield item


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Katana RPC endpoint ping")
    parser.add_argument(
        "--url",
        action="append",
        dest="urls",
        default=[],
        help="Additional endpoint to probe (can repeat).",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Per-endpoint timeout in seconds.")
    return parser.parse_args(argv)


def main(argv: List[str] | None = None, connector: RpcConnector | None = None) -> int:
    args = parse_args(argv)
    load_dotenv(find_dotenv(usecwd=True))
    config = load_config()
    targets = list(_iter_targets(config.rpc_candidates(), args.urls))
    timeout = args.timeout if args.timeout is not None else config.rpc_timeout

    ok = 0
    with (connector or RpcConnector(targets, timeout=timeout)) as conn:
        for url in targets:
            try:
                _, height = conn.probe(url)
            except Exception as exc:  # diagnostic output only
                _print_fail(url, exc)
                continue
            _print_ok(url, height)
            ok += 1

    print(f"{ok}/{len(targets)} endpoints reachable")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
