"""Pacing Controller - irregular, human-looking gaps between swaps."""

import math
import random
import time
from typing import Callable, Optional

from rich.console import Console

console = Console()


class Pacer:
    def __init__(self, min_seconds: float = 30, max_seconds: float = 90,
                 rng: Optional[random.Random] = None,
                 sleep: Callable[[float], object] = time.sleep):
        if not (math.isfinite(min_seconds) and math.isfinite(max_seconds)):
            raise ValueError("delay range must be finite")
        if min_seconds < 0 or min_seconds > max_seconds:
            raise ValueError("delay range must satisfy 0 <= min <= max")
        self.min_seconds = min_seconds
        self.max_seconds = max_seconds
        self.rng = rng or random.Random()
        self.sleep = sleep

    def next_delay(self) -> float:
        delay = self.rng.uniform(self.min_seconds, self.max_seconds)
        # uniform() may round a hair past the bounds.
        return min(max(delay, self.min_seconds), self.max_seconds)

    def pace(self) -> float:
        delay = self.next_delay()
        console.print(f"[dim]Waiting {delay:.0f} seconds...[/dim]\n")
        self.sleep(delay)
        return delay
