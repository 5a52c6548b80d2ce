"""
Pair Catalog.

A fixed, ordered list of directed trading pairs. Built once at startup from
the configured token addresses and never mutated afterwards.
"""

import random
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Iterator, Optional

from auto_swapper.config import TokenConfig


@dataclass(frozen=True)
class TradingPair:
    source_asset: str
    destination_asset: str
    source_symbol: str
    destination_symbol: str
    decimals: int  # of the source asset
    min_reserve: Decimal  # human units of the source asset that are never traded

    def __post_init__(self):
        if self.source_asset.lower() == self.destination_asset.lower():
            raise ValueError(f"{self.source_symbol}: source and destination asset must differ")
        if self.decimals < 0:
            raise ValueError(f"{self.source_symbol}: decimals must be >= 0")
        object.__setattr__(self, "min_reserve", Decimal(str(self.min_reserve)))
        if self.min_reserve < 0:
            raise ValueError(f"{self.source_symbol}: min_reserve must be >= 0")

    @property
    def label(self) -> str:
        return f"{self.source_symbol} ➔ {self.destination_symbol}"

    @property
    def min_reserve_raw(self) -> int:
        """The reserve in the source asset's smallest unit."""
        return int(self.min_reserve.scaleb(self.decimals))


# symbol -> (decimals, minimum reserve)
TOKEN_DEFAULTS = {
    "ETH": (18, Decimal("0.005")),
    "USDT": (6, Decimal("10")),
    "BTC": (8, Decimal("0.0005")),
}

DEFAULT_ROUTES = [
    ("ETH", "USDT"),
    ("USDT", "ETH"),
    ("BTC", "USDT"),
    ("USDT", "BTC"),
    ("ETH", "BTC"),
    ("BTC", "ETH"),
]


class PairCatalog:
    """Uniform random selection over a static set of pairs."""

    def __init__(self, pairs: Iterable[TradingPair], rng: Optional[random.Random] = None):
        self.pairs = tuple(pairs)
        if not self.pairs:
            raise ValueError("Pair catalog must contain at least one pair")
        self.rng = rng or random.Random()

    def select_random_pair(self) -> TradingPair:
        return self.rng.choice(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[TradingPair]:
        return iter(self.pairs)


def build_default_catalog(tokens: TokenConfig, rng: Optional[random.Random] = None) -> PairCatalog:
    """ETH/USDT, BTC/USDT and ETH/BTC in both directions."""
    addresses = tokens.as_dict()
    pairs = []
    for source, destination in DEFAULT_ROUTES:
        decimals, min_reserve = TOKEN_DEFAULTS[source]
        pairs.append(TradingPair(
            source_asset=addresses[source],
            destination_asset=addresses[destination],
            source_symbol=source,
            destination_symbol=destination,
            decimals=decimals,
            min_reserve=min_reserve,
        ))
    return PairCatalog(pairs, rng=rng)
