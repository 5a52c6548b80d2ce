from decimal import Decimal

import pytest

from auto_swapper.markets.pairs import TradingPair

OWNER = "0x" + "a1" * 20
ROUTER = "0x" + "b2" * 20
ETH = "0x" + "11" * 20
USDT = "0x" + "22" * 20
BTC = "0x" + "33" * 20

OPTIONAL_ENV = [
    "RECEIPT_TIMEOUT", "FEE_TIER", "DEADLINE_SECONDS", "SWAP_GAS_LIMIT",
    "MIN_TRADE_FRACTION", "MAX_TRADE_FRACTION", "MIN_DELAY_SECONDS",
    "MAX_DELAY_SECONDS", "APPROVAL_POLICY", "MIN_AMOUNT_OUT",
]


class FixedRandom:
    """Stands in for random.Random with a scripted random()/uniform()."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value

    def uniform(self, a, b):
        return a + (b - a) * self.value

    def choice(self, seq):
        return seq[0]


class FakeChain:
    """Records every call; balances/allowances keyed by asset address."""

    address = OWNER

    def __init__(self, balances=None, allowances=None):
        self.balances = dict(balances or {})
        self.allowances = dict(allowances or {})
        self.calls = []
        self.approvals = []
        self.swaps = []
        self.failures = {}  # method name -> list of exceptions raised on successive calls
        self._tx = 0

    def fail(self, method, *errors):
        self.failures.setdefault(method, []).extend(errors)

    def _maybe_fail(self, method):
        self.calls.append(method)
        pending = self.failures.get(method)
        if pending:
            raise pending.pop(0)

    def _next_hash(self) -> str:
        self._tx += 1
        return "0x" + f"{self._tx:064x}"

    def get_balance(self, asset, account):
        self._maybe_fail("get_balance")
        return self.balances.get(asset, 0)

    def get_allowance(self, asset, owner, spender):
        self._maybe_fail("get_allowance")
        return self.allowances.get(asset, 0)

    def submit_approval(self, asset, spender, amount):
        self._maybe_fail("submit_approval")
        self.approvals.append((asset, spender, amount))
        self.allowances[asset] = amount
        return self._next_hash()

    def submit_swap(self, router, instruction, gas_limit=None):
        self._maybe_fail("submit_swap")
        self.swaps.append((router, instruction, gas_limit))
        return self._next_hash()

    def await_confirmation(self, tx_hash):
        self._maybe_fail("await_confirmation")
        return {"status": 1, "transactionHash": tx_hash}


@pytest.fixture
def eth_usdt():
    return TradingPair(ETH, USDT, "ETH", "USDT", 18, Decimal("0.005"))


@pytest.fixture
def usdt_btc():
    return TradingPair(USDT, BTC, "USDT", "BTC", 6, Decimal("10"))


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def configured_env(monkeypatch):
    monkeypatch.setenv("RPC_URL", "http://localhost:8545")
    monkeypatch.setenv("PRIVATE_KEY", "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318")
    monkeypatch.setenv("ROUTER_ADDRESS", ROUTER)
    monkeypatch.setenv("ETH_ADDRESS", ETH)
    monkeypatch.setenv("USDT_ADDRESS", USDT)
    monkeypatch.setenv("BTC_ADDRESS", BTC)
    for name in OPTIONAL_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
