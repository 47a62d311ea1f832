"""
Synthetic price and candle generation.

Each instrument gets a candle history produced by a bounded random walk and a
separately perturbed last-trade price. Both advance once per simulation tick.
The last bar of a series is the open bar and is the only one ever mutated;
sealed bars live in a bounded deque so the oldest is evicted automatically.
"""

import logging
from collections import deque
from datetime import datetime, timedelta
from typing import Callable, Deque, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from ..core.models import Candle, Instrument, PriceState


# Random-walk shape. Skews below 0.5 bias the walk slightly upward.
INIT_SKEW = 0.48
INIT_STEP = 0.008
WICK_STEP = 0.003
TICK_SKEW = 0.49
TICK_STEP = 0.0008


class CandleSeries:
    """
    Bounded candle history plus one open bar.

    ``history_depth`` counts sealed bars only. The open bar is extra, so a
    series shows at most ``history_depth + 1`` bars.
    """

    def __init__(self, symbol: str, history_depth: int):
        if history_depth <= 0:
            raise ValueError("History depth must be positive")
        self.symbol = symbol
        self.history_depth = history_depth
        self.sealed: Deque[Candle] = deque(maxlen=history_depth)
        self.current: Optional[Candle] = None

    def open_bar(self, candle: Candle) -> None:
        """Seal the current bar (if any) and start a new one"""
        if self.current is not None:
            self.sealed.append(self.current)
        self.current = candle

    @property
    def candles(self) -> List[Candle]:
        """Chronological bars, open bar last"""
        bars = list(self.sealed)
        if self.current is not None:
            bars.append(self.current)
        return bars

    def __len__(self) -> int:
        return len(self.sealed) + (1 if self.current is not None else 0)


class CandleGenerator:
    """Owns per-instrument candle series and price states"""

    def __init__(self, instruments: Iterable[Instrument],
                 rng: Optional[np.random.Generator] = None,
                 history_depth: int = 80,
                 bar_duration: timedelta = timedelta(minutes=1),
                 clock: Callable[[], datetime] = datetime.now):
        """
        Args:
            instruments: Instruments to simulate
            rng: Random source; anything with a ``random()`` method returning [0, 1)
            history_depth: Sealed bars kept per instrument (the open bar is extra)
            bar_duration: Wall-clock length of one bar
            clock: Returns the current time
        """
        if bar_duration.total_seconds() <= 0:
            raise ValueError("Bar duration must be positive")

        self.instruments: Dict[str, Instrument] = {i.symbol: i for i in instruments}
        self.rng = rng if rng is not None else np.random.default_rng()
        self.history_depth = history_depth
        self.bar_duration = bar_duration
        self.clock = clock

        self.series: Dict[str, CandleSeries] = {}
        self.price_states: Dict[str, PriceState] = {}
        self.logger = logging.getLogger(__name__)

    def _random(self) -> float:
        return float(self.rng.random())

    def _clamp(self, price: float, instrument: Instrument) -> float:
        return max(price, instrument.tick_size)

    def initialize(self, instrument: Optional[Instrument] = None) -> None:
        """Build the initial history for one instrument, or for all of them"""
        targets = [instrument] if instrument is not None else list(self.instruments.values())
        for target in targets:
            self.instruments.setdefault(target.symbol, target)
            self.series[target.symbol] = self._generate_history(target)
            self.price_states[target.symbol] = PriceState(
                symbol=target.symbol,
                last_price=target.base_price,
                rolling_volume=self._random() * 1e9 + 5e8,
            )
        self.logger.debug(f"Initialized candle history for {len(targets)} instrument(s)")

    def _generate_history(self, instrument: Instrument) -> CandleSeries:
        """history_depth + 1 bars ending at now, the last one left open"""
        series = CandleSeries(instrument.symbol, self.history_depth)
        now = self.clock()
        price = instrument.base_price

        for i in range(self.history_depth, -1, -1):
            change = (self._random() - INIT_SKEW) * price * INIT_STEP
            open_ = price
            close = self._clamp(price + change, instrument)
            high = max(open_, close) + self._random() * price * WICK_STEP
            low = self._clamp(min(open_, close) - self._random() * price * WICK_STEP, instrument)
            low = min(low, open_, close)
            volume = self._random() * 500 + 100
            series.open_bar(Candle(now - i * self.bar_duration, open_, high, low, close, volume))
            price = close

        return series

    def advance_prices(self) -> Dict[str, float]:
        """Perturb every last-trade price. Returns the new mark map."""
        for symbol, state in self.price_states.items():
            instrument = self.instruments[symbol]
            delta = (self._random() - TICK_SKEW) * instrument.base_price * TICK_STEP
            new_price = self._clamp(state.last_price + delta, instrument)

            state.last_delta = new_price - state.last_price
            state.last_price = new_price
            state.percent_change = (new_price - instrument.base_price) / instrument.base_price * 100
        return self.prices()

    def advance_candles(self) -> None:
        """Move each open bar's close; roll to a new bar once it has aged out"""
        now = self.clock()
        for symbol, instrument in self.instruments.items():
            series = self.series.get(symbol)
            if series is None or series.current is None:
                continue

            bar = series.current
            delta = (self._random() - TICK_SKEW) * instrument.base_price * TICK_STEP
            new_close = self._clamp(bar.close + delta, instrument)
            tick_volume = self._random() * 5

            bar.close = new_close
            bar.high = max(bar.high, new_close)
            bar.low = min(bar.low, new_close)
            bar.volume += tick_volume

            state = self.price_states.get(symbol)
            if state is not None:
                state.rolling_volume += tick_volume * state.last_price

            if now - bar.open_time > self.bar_duration:
                series.open_bar(Candle(now, new_close, new_close, new_close, new_close,
                                       self._random() * 200))
                self.logger.debug(f"{symbol}: sealed bar {bar.open_time:%H:%M:%S} close={new_close:.4f}")

    def candles(self, symbol: str) -> List[Candle]:
        series = self.series.get(symbol)
        return series.candles if series is not None else []

    def price(self, symbol: str) -> Optional[PriceState]:
        return self.price_states.get(symbol)

    def prices(self) -> Dict[str, float]:
        """Mark price per symbol"""
        return {symbol: state.last_price for symbol, state in self.price_states.items()}

    def to_frame(self, symbol: str) -> pd.DataFrame:
        """Candle series as an OHLCV DataFrame indexed by open time"""
        return candles_to_frame(self.candles(symbol))


def candles_to_frame(candles: List[Candle]) -> pd.DataFrame:
    columns = ['open', 'high', 'low', 'close', 'volume']
    if not candles:
        return pd.DataFrame(columns=columns, index=pd.DatetimeIndex([], name='open_time'))
    frame = pd.DataFrame(
        [[c.open, c.high, c.low, c.close, c.volume] for c in candles],
        columns=columns,
        index=pd.DatetimeIndex([c.open_time for c in candles], name='open_time'),
    )
    return frame
