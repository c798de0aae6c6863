from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional, Tuple

import requests
from web3 import Web3

from utils.http import build_session, request_kwargs

log = logging.getLogger(__name__)

ERC20_ABI_MIN = [
    {"constant": True, "inputs": [{"name": "owner", "type": "address"}], "name": "balanceOf", "outputs": [{"name": "", "type": "uint256"}], "type": "function"},
]

UINT256_MAX = 2 ** 256 - 1

ClientFactory = Callable[[str, float], Any]


class RpcConnectionError(Exception):
    """Raised when no candidate endpoint answered the liveness probe."""

    def __init__(self, errors: List[Tuple[str, str]]):
        self.errors = list(errors)
        if self.errors:
            detail = "; ".join(f"{url}: {err}" for url, err in self.errors)
        else:
            detail = "no RPC endpoints configured"
        super().__init__(f"all RPC endpoints failed ({detail})")


def _as_uint(value: Any, what: str) -> int:
    # bool is an int subclass but never a valid RPC quantity
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"malformed {what}: {value!r}")
    if value < 0 or value > UINT256_MAX:
        raise ValueError(f"{what} out of range: {value}")
    return value


def build_web3(url: str, timeout: float, session: Optional[requests.Session] = None) -> Web3:
    """Web3 client over HTTP with a bounded request timeout and no provider-level retries."""
    provider = Web3.HTTPProvider(
        url,
        request_kwargs=request_kwargs(timeout),
        session=session,
        exception_retry_configuration=None,
    )
    return Web3(provider)


class Connection:
    """Read-only handle on one endpoint. Not mutated after creation."""

    def __init__(self, url: str, client: Any):
        self.url = url
        self.client = client

    def block_number(self) -> int:
        return _as_uint(self.client.eth.block_number, "block number")

    def chain_id(self) -> int:
        return _as_uint(self.client.eth.chain_id, "chain id")

    def native_balance(self, owner: str) -> int:
        """Raw native balance (wei) of ``owner``."""
        wei = self.client.eth.get_balance(Web3.to_checksum_address(owner))
        return _as_uint(wei, "native balance")

    def token_balance(self, token_address: str, owner: str) -> int:
        """Raw ERC-20 ``balanceOf(owner)`` for the token contract."""
        contract = self.client.eth.contract(
            address=Web3.to_checksum_address(token_address), abi=ERC20_ABI_MIN
        )
        raw = contract.functions.balanceOf(Web3.to_checksum_address(owner)).call()
        return _as_uint(raw, "token balance")

    def __repr__(self) -> str:
        return f"Connection({self.url!r})"


class RpcConnector:
    """
    Owns the connection for one process run.

    ``connect()`` probes the candidates in order (one pass, no backoff) and
    memoises the first endpoint that answers; later calls reuse it.
    """

    def __init__(
        self,
        candidates: Iterable[str],
        timeout: float = 10.0,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.candidates: Tuple[str, ...] = tuple(c for c in candidates if c)
        self.timeout = timeout
        self._client_factory = client_factory
        self._session: Optional[requests.Session] = None
        self._connection: Optional[Connection] = None

    def _build_client(self, url: str) -> Any:
        if self._client_factory is not None:
            return self._client_factory(url, self.timeout)
        if self._session is None:
            self._session = build_session()
        return build_web3(url, self.timeout, self._session)

    def probe(self, url: str) -> Tuple[Connection, int]:
        """Open ``url`` and fetch the block height; raises on any failure."""
        connection = Connection(url, self._build_client(url))
        return connection, connection.block_number()

    def connect(self) -> Connection:
        if self._connection is not None:
            return self._connection

        errors: List[Tuple[str, str]] = []
        for url in self.candidates:
            try:
                connection, height = self.probe(url)
            except Exception as exc:
                log.warning("RPC probe failed for %s: %s", url, exc)
                errors.append((url, f"{type(exc).__name__}: {exc}"))
                continue
            log.info("Connected to %s (block %s)", url, height)
            self._connection = connection
            return connection

        raise RpcConnectionError(errors)

    @property
    def connection(self) -> Optional[Connection]:
        return self._connection

    def close(self) -> None:
        self._connection = None
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "RpcConnector":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
