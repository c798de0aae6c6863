"""Shared fakes for the RPC layer; no test touches the network."""
from __future__ import annotations

import threading
from decimal import Decimal
from typing import Dict, Optional

import pytest

from katana.catalog import Catalog
from katana.pricing import load_price_table
from katana.rpc import RpcConnectionError
from katana.tokens import KATANA_TOKENS

WALLET = "0x" + "ab" * 20


class FakeConnection:
    """Stands in for katana.rpc.Connection. Values may be ints or exceptions."""

    def __init__(self, native=0, tokens: Optional[Dict[str, object]] = None, url="http://fake-rpc"):
        self.url = url
        self.native = native
        self.tokens = {k.lower(): v for k, v in (tokens or {}).items()}
        self.calls = []
        self._lock = threading.Lock()

    def _answer(self, value):
        if isinstance(value, Exception):
            raise value
        return value

    def native_balance(self, owner):
        with self._lock:
            self.calls.append(("native", owner))
        return self._answer(self.native)

    def token_balance(self, token_address, owner):
        with self._lock:
            self.calls.append(("token", token_address.lower()))
        return self._answer(self.tokens.get(token_address.lower(), 0))

    def block_number(self):
        return 1234

    def chain_id(self):
        return 747474


class FakeConnector:
    def __init__(self, connection: Optional[FakeConnection] = None, error: Optional[Exception] = None):
        self.connection = connection
        self.error = error
        self.connects = 0

    def connect(self):
        self.connects += 1
        if self.error is not None:
            raise self.error
        return self.connection


@pytest.fixture
def wallet() -> str:
    return WALLET


@pytest.fixture
def catalog() -> Catalog:
    return Catalog(tokens=KATANA_TOKENS, prices=load_price_table())


@pytest.fixture
def token_addr():
    return {t.symbol: t.address for t in KATANA_TOKENS}


@pytest.fixture
def down_connector() -> FakeConnector:
    return FakeConnector(error=RpcConnectionError([("http://a", "ConnectionError: refused")]))


@pytest.fixture
def price_table():
    return load_price_table({"ETH": Decimal("2000")})
