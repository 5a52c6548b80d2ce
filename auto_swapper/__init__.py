"""
AutoSwapper - an unattended token swapper for a Uniswap V3 style router.

Picks a random directed pair, trades a random 30-70% of the balance above the
pair's reserve, approves the router once per token, and waits an irregular
30-90 seconds between swaps.
"""

__version__ = "0.1.0"
