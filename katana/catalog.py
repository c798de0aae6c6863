# -*- coding: utf-8 -*-
"""Static data bundle built once at start-up and handed to the commands."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional, Tuple

from katana.config import AppConfig, load_config
from katana.pricing import load_price_table
from katana.tokens import KATANA_TOKENS, TokenDescriptor
from katana.yields import (
    KATANA_POOLS,
    PLACEHOLDER_HOLDINGS,
    PLACEHOLDER_POSITIONS,
    YIELD_OPPORTUNITIES,
    PlaceholderHolding,
    Pool,
    Position,
    YieldOpportunity,
)

NETWORK_NAME = "Katana L2"


@dataclass(frozen=True)
class Catalog:
    tokens: Tuple[TokenDescriptor, ...]
    prices: Mapping[str, Decimal]
    pools: Tuple[Pool, ...] = KATANA_POOLS
    yields: Tuple[YieldOpportunity, ...] = YIELD_OPPORTUNITIES
    positions: Tuple[Position, ...] = PLACEHOLDER_POSITIONS
    placeholder_holdings: Tuple[PlaceholderHolding, ...] = PLACEHOLDER_HOLDINGS
    network_name: str = NETWORK_NAME


def load_catalog(config: Optional[AppConfig] = None) -> Catalog:
    """Build the catalog, applying the configured price overrides."""
    config = config or load_config()
    return Catalog(tokens=KATANA_TOKENS, prices=load_price_table(config.price_overrides))
