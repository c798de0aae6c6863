# -*- coding: utf-8 -*-
"""Known Katana L2 tokens. The native asset uses the zero-address sentinel."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Tuple

NATIVE_ADDRESS = "0x0000000000000000000000000000000000000000"


@dataclass(frozen=True)
class TokenDescriptor:
    address: str
    symbol: str
    name: str
    decimals: int
    price_usd: Optional[Decimal] = None

    @property
    def is_native(self) -> bool:
        return self.address.lower() == NATIVE_ADDRESS


KATANA_TOKENS: Tuple[TokenDescriptor, ...] = (
    TokenDescriptor(NATIVE_ADDRESS, "ETH", "Ether", 18),
    TokenDescriptor("0x4200000000000000000000000000000000000006", "WETH", "Wrapped Ether", 18),
    TokenDescriptor("0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913", "USDC", "USD Coin", 6),
    TokenDescriptor("0x94b008aA00579c1307B0EF2c499aD98a8ce58e58", "USDT", "Tether USD", 6),
    TokenDescriptor("0xDA10009cBd5D07dd0CeCc66161FC93D7c9000da1", "DAI", "Dai Stablecoin", 18),
)


def find_token(tokens: Iterable[TokenDescriptor], symbol: str) -> Optional[TokenDescriptor]:
    wanted = (symbol or "").strip().upper()
    if not wanted:
        return None
    for token in tokens:
        if token.symbol.upper() == wanted:
            return token
    return None
