# -*- coding: utf-8 -*-
"""
katana/yields.py: placeholder yield, position and fallback-holding tables.

None of this is read from contracts; the figures are fixed display data.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

D = Decimal


@dataclass(frozen=True)
class Pool:
    key: str
    address: str
    token: str
    name: str


@dataclass(frozen=True)
class YieldOpportunity:
    pool: str
    apy: float
    tvl: str
    risk: str


@dataclass(frozen=True)
class Position:
    pool: str
    deposited_usd: Decimal
    apy: float
    earned_usd: Decimal


@dataclass(frozen=True)
class PlaceholderHolding:
    symbol: str
    amount: Decimal
    value_usd: Decimal


@dataclass(frozen=True)
class PortfolioSummary:
    wallet_value: Decimal
    staked_value: Decimal
    pending_rewards: Decimal

    @property
    def total_value(self) -> Decimal:
        return self.wallet_value + self.staked_value + self.pending_rewards


KATANA_POOLS: Tuple[Pool, ...] = (
    Pool("eth-staking", "0x1234567890123456789012345678901234567890", "ETH", "ETH Staking"),
    Pool("usdc-lending", "0x2345678901234567890123456789012345678901", "USDC", "USDC Lending"),
    Pool("eth-usdc-lp", "0x3456789012345678901234567890123456789012", "ETH-USDC", "ETH-USDC LP"),
)

YIELD_OPPORTUNITIES: Tuple[YieldOpportunity, ...] = (
    YieldOpportunity("eth-staking", 12.5, "$45.2M", "Low"),
    YieldOpportunity("usdc-lending", 8.2, "$120.5M", "Low"),
    YieldOpportunity("eth-usdc-lp", 15.8, "$32.1M", "Medium"),
    YieldOpportunity("wbtc-eth-lp", 22.3, "$18.7M", "Medium"),
)

PLACEHOLDER_POSITIONS: Tuple[Position, ...] = (
    Position("eth-staking", D("2000"), 12.5, D("42.35")),
    Position("usdc-lending", D("3500"), 8.2, D("28.70")),
)

# Shown when live balances cannot be read.
PLACEHOLDER_HOLDINGS: Tuple[PlaceholderHolding, ...] = (
    PlaceholderHolding("ETH", D("2.4521"), D("4902.42")),
    PlaceholderHolding("USDC", D("5230.00"), D("5230.00")),
)


def filter_yields(
    opportunities: Iterable[YieldOpportunity], min_apy: Optional[float] = None
) -> List[YieldOpportunity]:
    """Keep opportunities with ``apy >= min_apy``; ``None`` keeps everything."""
    if min_apy is None:
        return list(opportunities)
    return [y for y in opportunities if y.apy >= min_apy]


def placeholder_wallet_value(holdings: Iterable[PlaceholderHolding]) -> Decimal:
    return sum((h.value_usd for h in holdings), D("0"))


def summarize_portfolio(wallet_value: Decimal, positions: Iterable[Position]) -> PortfolioSummary:
    positions = list(positions)
    return PortfolioSummary(
        wallet_value=wallet_value,
        staked_value=sum((p.deposited_usd for p in positions), D("0")),
        pending_rewards=sum((p.earned_usd for p in positions), D("0")),
    )
