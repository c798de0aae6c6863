# -*- coding: utf-8 -*-
"""
katana/config.py

Centralized configuration loader for the Katana CLI.
Typed getters over os.getenv plus a frozen AppConfig dataclass.

Usage:
    from katana.config import load_config
    config = load_config()
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

DEFAULT_RPC_URL = "https://rpc.katana.network"


def get_str(key: str, default: Optional[str] = None) -> str:
    return os.getenv(key, default or "").strip()


def get_int(key: str, default: int = 0) -> int:
    try:
        return int(os.getenv(key, default))
    except Exception:
        return default


def get_float(key: str, default: float = 0.0) -> float:
    try:
        return float(os.getenv(key, default))
    except Exception:
        return default


def get_list(key: str) -> List[str]:
    raw = os.getenv(key) or ""
    return [item.strip() for item in raw.split(",") if item.strip()]


def get_pairs(key: str) -> Dict[str, str]:
    """Parse ``SYM=value,SYM2=value2`` into an upper-cased dict; malformed pairs are skipped."""
    out: Dict[str, str] = {}
    for pair in get_list(key):
        sym, sep, value = pair.partition("=")
        sym, value = sym.strip().upper(), value.strip()
        if sep and sym and value:
            out[sym] = value
    return out


@dataclass(frozen=True)
class AppConfig:
    # RPC
    rpc_url: str = field(default_factory=lambda: get_str("KATANA_RPC_URL", DEFAULT_RPC_URL) or DEFAULT_RPC_URL)
    rpc_fallbacks: Tuple[str, ...] = field(default_factory=lambda: tuple(get_list("KATANA_RPC_FALLBACKS")))
    rpc_timeout: float = field(default_factory=lambda: get_float("KATANA_RPC_TIMEOUT", 10.0))

    # Wallet
    wallet_address: str = field(default_factory=lambda: get_str("KATANA_WALLET"))

    # Balance fan-out
    max_workers: int = field(default_factory=lambda: get_int("KATANA_MAX_WORKERS", 8))

    # Pricing
    price_overrides: Dict[str, str] = field(default_factory=lambda: get_pairs("KATANA_PRICE_OVERRIDES"))

    # Output
    log_level: str = field(default_factory=lambda: get_str("LOG_LEVEL", "WARNING").upper())
    color: bool = field(default_factory=lambda: os.getenv("NO_COLOR") is None)

    def rpc_candidates(self) -> List[str]:
        """Primary endpoint first, then fallbacks; blanks and duplicates dropped."""
        seen = set()
        out: List[str] = []
        for url in (self.rpc_url, *self.rpc_fallbacks):
            url = (url or "").strip()
            if url and url not in seen:
                seen.add(url)
                out.append(url)
        return out


def load_config() -> AppConfig:
    """
    Factory for AppConfig (reads the environment at call time).
    """
    return AppConfig()
