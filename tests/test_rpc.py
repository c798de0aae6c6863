from __future__ import annotations

import json

import pytest
import requests
import requests.adapters

from katana.rpc import Connection, RpcConnectionError, RpcConnector, build_web3
from utils.http import DEFAULT_HEADERS, build_session

GOOD = "http://good-rpc"
BAD = "http://bad-rpc"
SLOW = "http://slow-rpc"


class FakeCall:
    def __init__(self, value):
        self.value = value

    def call(self):
        if isinstance(self.value, Exception):
            raise self.value
        return self.value


class FakeFunctions:
    def __init__(self, balances, address):
        self._balances = balances
        self._address = address

    def balanceOf(self, owner):
        return FakeCall(self._balances.get(self._address.lower(), 0))


class FakeContract:
    def __init__(self, balances, address):
        self.functions = FakeFunctions(balances, address)


class FakeEth:
    def __init__(self, block=100, chain_id=747474, native=0, balances=None):
        self._block = block
        self.chain_id = chain_id
        self._native = native
        self._balances = balances or {}
        self.contract_calls = []

    @property
    def block_number(self):
        if isinstance(self._block, Exception):
            raise self._block
        return self._block

    def get_balance(self, owner):
        return self._native

    def contract(self, address, abi):
        self.contract_calls.append(address)
        return FakeContract(self._balances, address)


class FakeClient:
    def __init__(self, eth):
        self.eth = eth


def make_factory(clients):
    built = []

    def factory(url, timeout):
        built.append((url, timeout))
        return FakeClient(clients[url])

    factory.built = built
    return factory


def test_connect_returns_first_healthy_endpoint():
    factory = make_factory({
        BAD: FakeEth(block=requests.exceptions.ConnectionError("refused")),
        GOOD: FakeEth(block=42),
    })
    connector = RpcConnector([BAD, GOOD], timeout=5, client_factory=factory)

    conn = connector.connect()
    assert conn.url == GOOD
    assert [u for u, _ in factory.built] == [BAD, GOOD]
    assert all(t == 5 for _, t in factory.built)


def test_connection_is_memoised():
    factory = make_factory({GOOD: FakeEth(block=1)})
    connector = RpcConnector([GOOD], client_factory=factory)

    first = connector.connect()
    second = connector.connect()
    assert first is second
    assert len(factory.built) == 1
    assert connector.connection is first


def test_all_endpoints_failing_raises_with_details():
    factory = make_factory({
        BAD: FakeEth(block=requests.exceptions.ConnectionError("refused")),
        SLOW: FakeEth(block=requests.exceptions.ReadTimeout("timed out")),
    })
    connector = RpcConnector([BAD, SLOW], client_factory=factory)

    with pytest.raises(RpcConnectionError) as err:
        connector.connect()
    assert [url for url, _ in err.value.errors] == [BAD, SLOW]
    assert "ReadTimeout" in err.value.errors[1][1]
    assert connector.connection is None


def test_malformed_probe_response_is_a_failure():
    factory = make_factory({BAD: FakeEth(block="0x10"), GOOD: FakeEth(block=16)})
    connector = RpcConnector([BAD, GOOD], client_factory=factory)
    assert connector.connect().url == GOOD


def test_no_candidates():
    with pytest.raises(RpcConnectionError) as err:
        RpcConnector(["", None]).connect()
    assert "no RPC endpoints configured" in str(err.value)


def test_failed_connect_is_not_cached():
    eth = FakeEth(block=requests.exceptions.ConnectionError("down"))
    factory = make_factory({GOOD: eth})
    connector = RpcConnector([GOOD], client_factory=factory)
    with pytest.raises(RpcConnectionError):
        connector.connect()
    eth._block = 7
    assert connector.connect().block_number() == 7


def test_connection_balance_calls():
    token = "0x" + "cd" * 20
    owner = "0x" + "ab" * 20
    eth = FakeEth(native=5 * 10**18, balances={token: 123})
    conn = Connection(GOOD, FakeClient(eth))

    assert conn.native_balance(owner) == 5 * 10**18
    assert conn.token_balance(token, owner) == 123
    assert conn.chain_id() == 747474
    assert eth.contract_calls[0].lower() == token


def test_connection_rejects_malformed_values():
    owner = "0x" + "ab" * 20
    conn = Connection(GOOD, FakeClient(FakeEth(native=-1)))
    with pytest.raises(ValueError):
        conn.native_balance(owner)


def test_connection_rejects_malformed_address():
    conn = Connection(GOOD, FakeClient(FakeEth(native=1)))
    with pytest.raises(ValueError):
        conn.native_balance("not-an-address")


def test_context_manager_closes_session():
    connector = RpcConnector([GOOD], client_factory=make_factory({GOOD: FakeEth()}))
    with connector as c:
        c.connect()
    assert connector.connection is None


class RecordingAdapter(requests.adapters.BaseAdapter):
    """Answers every JSON-RPC call with block 0x10 and keeps the sent headers."""

    def __init__(self):
        super().__init__()
        self.sent_headers = []

    def send(self, request, **kwargs):
        self.sent_headers.append(dict(request.headers))
        body = json.loads(request.body)
        resp = requests.Response()
        resp.status_code = 200
        resp.headers["Content-Type"] = "application/json"
        resp._content = json.dumps({"jsonrpc": "2.0", "id": body["id"], "result": "0x10"}).encode()
        resp.url = request.url
        resp.request = request
        return resp

    def close(self):
        pass


def test_requests_carry_cli_user_agent():
    session = build_session()
    adapter = RecordingAdapter()
    session.mount("http://", adapter)
    connection = Connection("http://rpc.test", build_web3("http://rpc.test", 3, session))

    assert connection.block_number() == 16
    assert adapter.sent_headers
    assert adapter.sent_headers[-1]["User-Agent"] == DEFAULT_HEADERS["User-Agent"]
    session.close()


def test_build_web3_targets_url():
    session = requests.Session()
    w3 = build_web3("http://127.0.0.1:8545", 3, session)
    assert w3.provider.endpoint_uri == "http://127.0.0.1:8545"
    session.close()
