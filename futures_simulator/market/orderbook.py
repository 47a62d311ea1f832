"""
Synthetic order book built around a mid price.

The ladder is cosmetic depth for display. It is rebuilt from scratch on every
call and carries no continuity between consecutive snapshots.
"""

import math
from typing import List, Optional

import numpy as np

from ..core.models import BookLevel, OrderBook
from ..core.exceptions import InvalidArgumentError


MIN_LEVEL_SIZE = 0.2
LEVEL_SIZE_RANGE = 4.0
LEVEL_SPACING_TICKS = 2


class OrderBookSynthesizer:
    """Stateless ladder generator; only the random source is held"""

    def __init__(self, rng: Optional[np.random.Generator] = None, depth: int = 8):
        if depth < 1:
            raise InvalidArgumentError(f"Book depth must be at least 1, got {depth}")
        self.rng = rng if rng is not None else np.random.default_rng()
        self.depth = depth

    def _level_size(self) -> float:
        return round(float(self.rng.random()) * LEVEL_SIZE_RANGE + MIN_LEVEL_SIZE, 3)

    def generate(self, mid_price: float, tick_size: float, depth: Optional[int] = None) -> OrderBook:
        """
        Build ``depth`` ask and bid levels spaced two ticks apart.

        Args:
            mid_price: Reference price the ladder is centred on
            tick_size: Minimum price increment of the instrument
            depth: Levels per side (defaults to the synthesizer depth)

        Returns:
            OrderBook with asks ascending and bids descending from mid. Bid
            levels that would sit at or below zero are left out.

        Raises:
            InvalidArgumentError: non-positive/non-finite mid or tick size,
                or depth below 1
        """
        depth = self.depth if depth is None else depth
        if mid_price is None or not math.isfinite(mid_price) or mid_price <= 0:
            raise InvalidArgumentError(f"Mid price must be a finite positive number, got {mid_price!r}")
        if tick_size is None or not math.isfinite(tick_size) or tick_size <= 0:
            raise InvalidArgumentError(f"Tick size must be a finite positive number, got {tick_size!r}")
        if depth < 1:
            raise InvalidArgumentError(f"Book depth must be at least 1, got {depth}")

        step = tick_size * LEVEL_SPACING_TICKS
        asks = self._build_side([mid_price + k * step for k in range(1, depth + 1)])
        bids = self._build_side([mid_price - k * step for k in range(1, depth + 1)])
        return OrderBook(mid_price=mid_price, asks=tuple(asks), bids=tuple(bids))

    def _build_side(self, prices: List[float]) -> List[BookLevel]:
        levels = []
        total = 0.0
        for price in prices:
            size = self._level_size()
            if price <= 0:
                continue
            total += price * size
            levels.append(BookLevel(price=price, size=size, cumulative=total))
        return levels
