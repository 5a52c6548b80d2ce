"""
Trade Executor - Where sized amounts become swaps.

Handles:
- Building the exactInputSingle parameters for one directed pair
- Submitting the swap through the chain client
- Waiting for the receipt

Minimum output defaults to 0, i.e. no slippage protection. That is a known
risk of this agent, kept behind `min_output_policy` so a stricter rule can be
plugged in without touching the loop.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from rich.console import Console

from auto_swapper.chain.client import format_tx_hash
from auto_swapper.markets.pairs import TradingPair

console = Console()

DEFAULT_FEE_TIER = 3000  # 0.3% pool
DEFAULT_DEADLINE_SECONDS = 300
DEFAULT_SWAP_GAS_LIMIT = 150_000


@dataclass(frozen=True)
class SwapInstruction:
    token_in: str
    token_out: str
    fee: int
    recipient: str
    deadline: int
    amount_in: int
    amount_out_minimum: int = 0
    sqrt_price_limit_x96: int = 0  # no price limit

    def as_params(self) -> dict:
        return {
            "tokenIn": self.token_in,
            "tokenOut": self.token_out,
            "fee": self.fee,
            "recipient": self.recipient,
            "deadline": self.deadline,
            "amountIn": self.amount_in,
            "amountOutMinimum": self.amount_out_minimum,
            "sqrtPriceLimitX96": self.sqrt_price_limit_x96,
        }


@dataclass
class SwapResult:
    pair: TradingPair
    amount: int
    tx_hash: str
    receipt: Optional[Any] = None


def no_slippage_guard(pair: TradingPair, amount: int) -> int:
    """Accept any output."""
    return 0


def fixed_min_output(minimum: int) -> Callable[[TradingPair, int], int]:
    """Policy returning the same configured minimum for every swap."""
    if minimum == 0:
        return no_slippage_guard

    def policy(pair: TradingPair, amount: int) -> int:
        return minimum

    return policy


class TradeExecutor:
    def __init__(self, chain, router: str, recipient: str,
                 fee_tier: int = DEFAULT_FEE_TIER,
                 deadline_seconds: int = DEFAULT_DEADLINE_SECONDS,
                 gas_limit: int = DEFAULT_SWAP_GAS_LIMIT,
                 min_output_policy: Callable[[TradingPair, int], int] = no_slippage_guard,
                 clock: Callable[[], float] = time.time):
        self.chain = chain
        self.router = router
        self.recipient = recipient
        self.fee_tier = fee_tier
        self.deadline_seconds = deadline_seconds
        self.gas_limit = gas_limit
        self.min_output_policy = min_output_policy
        self.clock = clock

    def build_instruction(self, pair: TradingPair, amount: int) -> SwapInstruction:
        return SwapInstruction(
            token_in=pair.source_asset,
            token_out=pair.destination_asset,
            fee=self.fee_tier,
            recipient=self.recipient,
            deadline=int(self.clock()) + self.deadline_seconds,
            amount_in=amount,
            amount_out_minimum=self.min_output_policy(pair, amount),
        )

    def execute_swap(self, pair: TradingPair, amount: int, human_amount=None) -> SwapResult:
        """
        Submit the swap and block until it is mined.

        Any submission or confirmation failure propagates to the caller.
        """
        instruction = self.build_instruction(pair, amount)

        shown = human_amount if human_amount is not None else amount
        console.print(f"[bold]Swap {shown} {pair.source_symbol} ➔ {pair.destination_symbol}[/bold]")
        tx_hash = format_tx_hash(self.chain.submit_swap(self.router, instruction, self.gas_limit))
        console.print(f"  Tx sent: {tx_hash}")

        receipt = self.chain.await_confirmation(tx_hash)
        console.print("  [green]Swap confirmed![/green]")

        return SwapResult(pair=pair, amount=amount, tx_hash=tx_hash, receipt=receipt)
