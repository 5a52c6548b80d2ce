"""
The Agent - the unattended swap loop.

Main loop:
1. Pick a random pair
2. Size the trade from the live balance (skip if nothing above the reserve)
3. Approve the router for the source token if needed
4. Swap and wait for the receipt
5. Wait a random 30-90 seconds and go again

A failure anywhere in 1-4 is printed and the cycle ends early; the loop
itself only stops when asked to.
"""

import random
import signal
import threading
from datetime import datetime
from enum import Enum
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from auto_swapper.chain.client import ChainClient
from auto_swapper.config import AgentConfig
from auto_swapper.markets.pairs import PairCatalog, build_default_catalog
from auto_swapper.trading.allowance import AllowanceManager
from auto_swapper.trading.executor import SwapResult, TradeExecutor, fixed_min_output
from auto_swapper.trading.pacing import Pacer
from auto_swapper.trading.sizer import AmountSizer

console = Console()


class CycleOutcome(Enum):
    SWAPPED = "swapped"
    SKIPPED = "skipped"
    FAILED = "failed"


class RunState:
    """Stop token checked between cycles. `wait` doubles as an interruptible sleep."""

    def __init__(self):
        self._stopped = threading.Event()

    @property
    def running(self) -> bool:
        return not self._stopped.is_set()

    def stop(self):
        self._stopped.set()

    def wait(self, seconds: float) -> bool:
        return self._stopped.wait(seconds)


class AutoSwapper:
    """
    Ties the pair catalog, sizer, allowance manager, executor and pacer
    together. Every collaborator is passed in, so tests can hand it a fake
    chain client and scripted randomness.
    """

    def __init__(self, chain, catalog: PairCatalog, sizer: AmountSizer,
                 allowances: AllowanceManager, executor: TradeExecutor, pacer: Pacer,
                 router: str, run_state: Optional[RunState] = None):
        self.chain = chain
        self.catalog = catalog
        self.sizer = sizer
        self.allowances = allowances
        self.executor = executor
        self.pacer = pacer
        self.router = router
        self.run_state = run_state or RunState()

        self.cycle_count = 0
        self.swap_count = 0
        self.skip_count = 0
        self.failure_count = 0
        self.last_result: Optional[SwapResult] = None

    @classmethod
    def from_config(cls, config: AgentConfig, run_state: Optional[RunState] = None,
                    chain=None) -> "AutoSwapper":
        run_state = run_state or RunState()
        chain = chain or ChainClient.from_config(config)
        rng = random.Random()
        min_fraction, max_fraction = config.fraction_range
        min_delay, max_delay = config.delay_range
        router = config.exchange.router_address

        return cls(
            chain=chain,
            catalog=build_default_catalog(config.tokens, rng=rng),
            sizer=AmountSizer(rng=rng, min_fraction=min_fraction, max_fraction=max_fraction),
            allowances=AllowanceManager(chain, chain.address, policy=config.trading.approval_policy),
            executor=TradeExecutor(
                chain,
                router=router,
                recipient=chain.address,
                fee_tier=config.fee_tier,
                deadline_seconds=config.deadline_seconds,
                gas_limit=config.swap_gas_limit,
                min_output_policy=fixed_min_output(config.min_amount_out),
            ),
            pacer=Pacer(min_delay, max_delay, rng=rng, sleep=run_state.wait),
            router=router,
            run_state=run_state,
        )

    def start(self, max_cycles: Optional[int] = None):
        """Print the banner, install signal handlers and run until stopped."""
        console.print(Panel(
            f"Wallet: [cyan]{self.chain.address}[/cyan]\n"
            f"Router: [cyan]{self.router}[/cyan]\n"
            f"Pairs: {len(self.catalog)}\n"
            f"Delay: {self.pacer.min_seconds:.0f}-{self.pacer.max_seconds:.0f}s\n"
            f"Approval policy: {self.allowances.policy}",
            title="[bold]AutoSwapper[/bold]",
        ))

        signal.signal(signal.SIGINT, self._shutdown_handler)
        signal.signal(signal.SIGTERM, self._shutdown_handler)

        console.print("\n[bold green]Starting auto swap...[/bold green]\n")
        self.run(max_cycles)
        self._shutdown()

    def run(self, max_cycles: Optional[int] = None):
        """Cycle, then pace, until the run state is stopped or max_cycles is hit."""
        while self.run_state.running:
            try:
                self.cycle_count += 1
                console.rule(f"[bold cyan]Cycle #{self.cycle_count}[/bold cyan] - {datetime.now().strftime('%H:%M:%S')}")

                self._record(self.run_cycle())

                if max_cycles is not None and self.cycle_count >= max_cycles:
                    break

                self.pacer.pace()

            except KeyboardInterrupt:
                break

    def run_cycle(self) -> CycleOutcome:
        """One select -> size -> approve -> execute pass. Never raises Exception."""
        try:
            pair = self.catalog.select_random_pair()
            console.print(f"[cyan]Pair: {pair.label}[/cyan]")

            balance = self.chain.get_balance(pair.source_asset, self.chain.address)
            decision = self.sizer.size_trade(pair, balance)

            if not decision.viable:
                console.print(f"[yellow]Insufficient {pair.source_symbol} balance, "
                              f"looking for another pair...[/yellow]")
                return CycleOutcome.SKIPPED

            human_amount = decision.human_amount(pair.decimals)
            console.print(f"  Sized {human_amount} {pair.source_symbol} "
                          f"({decision.fraction:.0%} of {decision.available} available)")

            self.allowances.ensure_approved(
                pair.source_asset, self.router, pair.source_symbol, required=decision.amount,
            )
            self.last_result = self.executor.execute_swap(pair, decision.amount, human_amount)
            return CycleOutcome.SWAPPED

        except Exception as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            console.print("[dim]Retrying after delay...[/dim]")
            return CycleOutcome.FAILED

    def _record(self, outcome: CycleOutcome):
        if outcome is CycleOutcome.SWAPPED:
            self.swap_count += 1
        elif outcome is CycleOutcome.SKIPPED:
            self.skip_count += 1
        else:
            self.failure_count += 1

    def _shutdown_handler(self, signum, frame):
        console.print("\n[yellow]Shutdown signal received...[/yellow]")
        self.run_state.stop()

    def _shutdown(self):
        console.print("\n[yellow]Shutting down AutoSwapper...[/yellow]")
        console.print(f"[dim]Cycles: {self.cycle_count} | Swaps: {self.swap_count} | "
                      f"Skipped: {self.skip_count} | Failed: {self.failure_count}[/dim]")
