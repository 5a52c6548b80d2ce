"""
Configuration for the AutoSwapper.

Everything comes from the environment (or a .env file) and is read once,
when the config object is built. Nothing here changes after startup.
"""

import math
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv
from web3 import Web3

load_dotenv()

APPROVAL_POLICIES = ("nonzero", "sufficient")
MAX_UINT24 = 2**24 - 1  # router fee field


class ConfigError(ValueError):
    """Missing or malformed startup configuration. Fatal, never retried."""


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


@dataclass
class WalletConfig:
    private_key: str = field(default_factory=lambda: _env("PRIVATE_KEY"))


@dataclass
class RPCConfig:
    rpc_url: str = field(default_factory=lambda: _env("RPC_URL"))
    receipt_timeout: str = field(default_factory=lambda: _env("RECEIPT_TIMEOUT", "120"))


@dataclass
class ExchangeConfig:
    router_address: str = field(default_factory=lambda: _env("ROUTER_ADDRESS"))
    fee_tier: str = field(default_factory=lambda: _env("FEE_TIER", "3000"))
    deadline_seconds: str = field(default_factory=lambda: _env("DEADLINE_SECONDS", "300"))
    swap_gas_limit: str = field(default_factory=lambda: _env("SWAP_GAS_LIMIT", "150000"))


@dataclass
class TokenConfig:
    usdt_address: str = field(default_factory=lambda: _env("USDT_ADDRESS"))
    eth_address: str = field(default_factory=lambda: _env("ETH_ADDRESS"))
    btc_address: str = field(default_factory=lambda: _env("BTC_ADDRESS"))

    def as_dict(self) -> dict[str, str]:
        return {"USDT": self.usdt_address, "ETH": self.eth_address, "BTC": self.btc_address}


@dataclass
class TradingConfig:
    min_trade_fraction: str = field(default_factory=lambda: _env("MIN_TRADE_FRACTION", "0.30"))
    max_trade_fraction: str = field(default_factory=lambda: _env("MAX_TRADE_FRACTION", "0.70"))
    min_delay_seconds: str = field(default_factory=lambda: _env("MIN_DELAY_SECONDS", "30"))
    max_delay_seconds: str = field(default_factory=lambda: _env("MAX_DELAY_SECONDS", "90"))
    approval_policy: str = field(default_factory=lambda: _env("APPROVAL_POLICY", "nonzero").lower())
    # No slippage protection unless explicitly configured.
    min_amount_out: str = field(default_factory=lambda: _env("MIN_AMOUNT_OUT", "0"))


@dataclass
class AgentConfig:
    wallet: WalletConfig = field(default_factory=WalletConfig)
    rpc: RPCConfig = field(default_factory=RPCConfig)
    exchange: ExchangeConfig = field(default_factory=ExchangeConfig)
    tokens: TokenConfig = field(default_factory=TokenConfig)
    trading: TradingConfig = field(default_factory=TradingConfig)

    # Typed views. Only meaningful after validate() has passed.

    @property
    def receipt_timeout(self) -> float:
        return float(self.rpc.receipt_timeout)

    @property
    def fee_tier(self) -> int:
        return int(self.exchange.fee_tier)

    @property
    def deadline_seconds(self) -> int:
        return int(self.exchange.deadline_seconds)

    @property
    def swap_gas_limit(self) -> int:
        return int(self.exchange.swap_gas_limit)

    @property
    def fraction_range(self) -> tuple[Decimal, Decimal]:
        return Decimal(self.trading.min_trade_fraction), Decimal(self.trading.max_trade_fraction)

    @property
    def delay_range(self) -> tuple[float, float]:
        return float(self.trading.min_delay_seconds), float(self.trading.max_delay_seconds)

    @property
    def min_amount_out(self) -> int:
        return int(self.trading.min_amount_out)

    def validate(self) -> "AgentConfig":
        """Check every startup value and raise ConfigError listing all problems."""
        problems = []

        if not self.rpc.rpc_url:
            problems.append("RPC_URL is not set")
        if not self.wallet.private_key:
            problems.append("PRIVATE_KEY is not set")

        addresses = {"ROUTER_ADDRESS": self.exchange.router_address}
        addresses.update({f"{sym}_ADDRESS": addr for sym, addr in self.tokens.as_dict().items()})
        for name, value in addresses.items():
            if not value:
                problems.append(f"{name} is not set")
            elif not Web3.is_address(value):
                problems.append(f"{name} is not a valid address: {value!r}")

        problems.extend(self._check_numbers())

        if self.trading.approval_policy not in APPROVAL_POLICIES:
            problems.append(
                f"APPROVAL_POLICY must be one of {', '.join(APPROVAL_POLICIES)}, "
                f"got {self.trading.approval_policy!r}"
            )

        if problems:
            raise ConfigError("Invalid configuration:\n  - " + "\n  - ".join(problems))
        return self

    def _check_numbers(self) -> list[str]:
        problems = []
        # name -> (value, lowest allowed, highest allowed)
        integers = {
            "FEE_TIER": (self.exchange.fee_tier, 0, MAX_UINT24),
            "DEADLINE_SECONDS": (self.exchange.deadline_seconds, 1, None),
            "SWAP_GAS_LIMIT": (self.exchange.swap_gas_limit, 0, None),
            "MIN_AMOUNT_OUT": (self.trading.min_amount_out, 0, None),
        }
        for name, (value, lowest, highest) in integers.items():
            try:
                number = int(value)
            except ValueError:
                problems.append(f"{name} must be an integer, got {value!r}")
                continue
            if number < lowest:
                problems.append(f"{name} must be at least {lowest}")
            elif highest is not None and number > highest:
                problems.append(f"{name} must be at most {highest}")

        try:
            timeout = float(self.rpc.receipt_timeout)
            if not math.isfinite(timeout) or timeout <= 0:
                problems.append("RECEIPT_TIMEOUT must be a positive finite number")
        except ValueError:
            problems.append(f"RECEIPT_TIMEOUT must be a number, got {self.rpc.receipt_timeout!r}")

        try:
            low, high = self.fraction_range
            if not (0 < low < high < 1):
                problems.append("trade fractions must satisfy 0 < MIN_TRADE_FRACTION < MAX_TRADE_FRACTION < 1")
        except InvalidOperation:
            problems.append("MIN_TRADE_FRACTION and MAX_TRADE_FRACTION must be decimals")

        try:
            low, high = self.delay_range
            if not (math.isfinite(low) and math.isfinite(high)):
                problems.append("MIN_DELAY_SECONDS and MAX_DELAY_SECONDS must be finite")
            elif low < 0 or low > high:
                problems.append("delays must satisfy 0 <= MIN_DELAY_SECONDS <= MAX_DELAY_SECONDS")
        except ValueError:
            problems.append("MIN_DELAY_SECONDS and MAX_DELAY_SECONDS must be numbers")

        return problems
