"""
Amount Sizer - how much of the source balance goes into one swap.

Takes a random 30-70% slice of whatever sits above the pair's reserve.
All arithmetic is Decimal so an 18-decimal balance never loses wei to floats.
"""

import random
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, localcontext
from typing import Optional

from auto_swapper.markets.pairs import TradingPair

# Enough digits for a full uint256 plus 18 decimals.
PRECISION = 100


def to_human(raw: int, decimals: int) -> Decimal:
    """Smallest units to human units, without rounding."""
    with localcontext() as ctx:
        ctx.prec = PRECISION
        return Decimal(raw).scaleb(-decimals)


@dataclass
class SizingDecision:
    amount: Optional[int]  # smallest units, None when there is nothing to trade
    available: Decimal  # human units above the reserve
    fraction: Optional[Decimal] = None

    @property
    def viable(self) -> bool:
        return self.amount is not None

    def human_amount(self, decimals: int) -> Decimal:
        if self.amount is None:
            return Decimal(0)
        return to_human(self.amount, decimals)


class AmountSizer:
    def __init__(self, rng: Optional[random.Random] = None,
                 min_fraction=Decimal("0.30"), max_fraction=Decimal("0.70")):
        self.rng = rng or random.Random()
        self.min_fraction = Decimal(str(min_fraction))
        self.max_fraction = Decimal(str(max_fraction))
        if not (0 < self.min_fraction < self.max_fraction < 1):
            raise ValueError("fractions must satisfy 0 < min < max < 1")

    def draw_fraction(self) -> Decimal:
        """Uniform in [min_fraction, max_fraction)."""
        with localcontext() as ctx:
            ctx.prec = PRECISION
            span = self.max_fraction - self.min_fraction
            return self.min_fraction + Decimal(self.rng.random()) * span

    def size_trade(self, pair: TradingPair, balance: int) -> SizingDecision:
        with localcontext() as ctx:
            ctx.prec = PRECISION

            human_balance = Decimal(balance).scaleb(-pair.decimals)
            available = max(human_balance - pair.min_reserve, Decimal(0))
            if available <= 0:
                return SizingDecision(amount=None, available=available)

            fraction = self.draw_fraction()
            amount = (available * fraction).quantize(Decimal(1).scaleb(-pair.decimals), rounding=ROUND_DOWN)
            raw = int(amount.scaleb(pair.decimals))

        # Dust: the slice truncates to nothing at this precision.
        if raw <= 0:
            return SizingDecision(amount=None, available=available, fraction=fraction)

        return SizingDecision(amount=raw, available=available, fraction=fraction)
