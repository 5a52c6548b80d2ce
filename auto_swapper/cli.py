"""
CLI Entry Point for AutoSwapper.

Commands:
  run       - Start the swap loop
  config    - Show current configuration
  pairs     - List the trading pairs
  balances  - Show wallet balances per source token
"""

import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from auto_swapper import __version__
from auto_swapper.agent import AutoSwapper
from auto_swapper.chain.client import ChainClient
from auto_swapper.config import AgentConfig, ConfigError
from auto_swapper.markets.pairs import build_default_catalog
from auto_swapper.trading.sizer import to_human

console = Console()


def _load_config() -> AgentConfig:
    try:
        return AgentConfig().validate()
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        console.print("Set up your .env file first. See .env.example")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="AutoSwapper")
def cli():
    """AutoSwapper - randomized token swaps on a V3 router."""
    pass


@cli.command()
@click.option("--cycles", type=int, default=None, help="Stop after this many cycles (default: run forever)")
@click.option("--min-delay", type=float, default=None, help="Override MIN_DELAY_SECONDS")
@click.option("--max-delay", type=float, default=None, help="Override MAX_DELAY_SECONDS")
def run(cycles, min_delay, max_delay):
    """Start the swap loop. Real transactions, real funds."""
    config = AgentConfig()
    if min_delay is not None:
        config.trading.min_delay_seconds = str(min_delay)
    if max_delay is not None:
        config.trading.max_delay_seconds = str(max_delay)

    try:
        config.validate()
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    agent = AutoSwapper.from_config(config)
    agent.start(max_cycles=cycles)


@cli.command()
def config():
    """Show current configuration."""
    cfg = AgentConfig()
    tokens = cfg.tokens.as_dict()

    console.print(Panel(
        f"RPC: {cfg.rpc.rpc_url or '[red]Not set[/red]'}\n"
        f"Wallet: {'Configured' if cfg.wallet.private_key else '[red]Not set[/red]'}\n"
        f"Router: {cfg.exchange.router_address or '[red]Not set[/red]'}\n"
        + "".join(f"{sym}: {addr or '[red]Not set[/red]'}\n" for sym, addr in tokens.items())
        + f"Fee Tier: {cfg.exchange.fee_tier}\n"
        f"Deadline: {cfg.exchange.deadline_seconds}s\n"
        f"Swap Gas Limit: {cfg.exchange.swap_gas_limit}\n"
        f"Trade Fraction: {cfg.trading.min_trade_fraction}-{cfg.trading.max_trade_fraction}\n"
        f"Delay: {cfg.trading.min_delay_seconds}-{cfg.trading.max_delay_seconds}s\n"
        f"Approval Policy: {cfg.trading.approval_policy}\n"
        f"Min Amount Out: {cfg.trading.min_amount_out}",
        title="[bold]AutoSwapper Configuration[/bold]",
    ))


@cli.command()
def pairs():
    """List the trading pairs."""
    cfg = _load_config()
    catalog = build_default_catalog(cfg.tokens)

    table = Table(title=f"{len(catalog)} Trading Pairs")
    table.add_column("Pair", style="cyan")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Decimals")
    table.add_column("Min Reserve", style="yellow")

    for pair in catalog:
        table.add_row(pair.label, pair.source_asset, pair.destination_asset,
                      str(pair.decimals), str(pair.min_reserve))

    console.print(table)


@cli.command()
def balances():
    """Show wallet balances and what is tradeable above each reserve."""
    cfg = _load_config()
    chain = ChainClient.from_config(cfg)
    catalog = build_default_catalog(cfg.tokens)

    table = Table(title=f"Balances for {chain.address}")
    table.add_column("Token", style="cyan")
    table.add_column("Balance")
    table.add_column("Reserve", style="yellow")
    table.add_column("Available", style="green")

    seen = set()
    for pair in catalog:
        if pair.source_symbol in seen:
            continue
        seen.add(pair.source_symbol)

        balance = chain.get_balance(pair.source_asset, chain.address)
        human = to_human(balance, pair.decimals)
        available = to_human(max(balance - pair.min_reserve_raw, 0), pair.decimals)
        table.add_row(pair.source_symbol, str(human), str(pair.min_reserve), str(available))

    console.print(table)


def main():
    cli()


if __name__ == "__main__":
    main()
