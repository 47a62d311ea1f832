"""
Simulation engine that owns all mutable market and trading state.
"""

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from ..config.simulation_config import SimulationConfig, DEFAULT_CONFIG
from ..core.models import Instrument, Order, OrderBook, OrderEstimate, OrderResult
from ..core.types import OrderSide, OrderType
from ..core.validation import OrderValidator
from ..market.instruments import InstrumentRegistry
from ..market.candles import CandleGenerator
from ..market.orderbook import OrderBookSynthesizer
from ..portfolio.ledger import Ledger
from ..portfolio.position import Position
from ..realtime.clock import SimulationClock
from .orders import OrderEstimator
from .snapshot import Snapshot, SnapshotProjector


class SimulationEngine:
    """
    One trading session: synthetic market plus the user's ledger.

    Ticks and user actions are serialized through a single re-entrant lock,
    so a snapshot always reflects one consistent tick.
    """

    def __init__(self, config: SimulationConfig = DEFAULT_CONFIG,
                 registry: Optional[InstrumentRegistry] = None,
                 rng: Optional[np.random.Generator] = None,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Args:
            config: Simulation constants
            registry: Tradable instruments (defaults to the five perpetuals)
            rng: Random source shared by candle and book synthesis; defaults to
                ``numpy.random.default_rng(config.seed)``
            clock: Returns the current time; inject for deterministic bar rolls
        """
        self.config = config
        self.registry = registry or InstrumentRegistry()
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.clock = clock

        self.generator = CandleGenerator(
            self.registry,
            rng=self.rng,
            history_depth=config.history_depth,
            bar_duration=config.bar_duration,
            clock=clock,
        )
        self.synthesizer = OrderBookSynthesizer(self.rng, depth=config.book_depth)
        self.ledger = Ledger(config.initial_balance, average_entry=config.average_entry, clock=clock)
        self.estimator = OrderEstimator(config.fee_rate)
        self.projector = SnapshotProjector(self.registry.instruments, self.generator, self.ledger)
        self.ticker = SimulationClock(self.tick, interval=config.tick_interval)

        self.selected_index = 0
        self.book: Optional[OrderBook] = None
        self.tick_count = 0
        self._lock = threading.RLock()
        self.logger = logging.getLogger(__name__)

        self.generator.initialize()
        self._rebuild_book()

    # ------------------------------------------------------------------ market

    @property
    def selected(self) -> Instrument:
        return self.registry.get(self.selected_index)

    def mid_price(self, symbol: Optional[str] = None) -> float:
        """Last price for a symbol, falling back to its base price"""
        instrument = self.registry.by_symbol(symbol) if symbol else self.selected
        state = self.generator.price(instrument.symbol)
        if state is None or state.last_price <= 0:
            return instrument.base_price
        return state.last_price

    def _rebuild_book(self) -> None:
        instrument = self.selected
        self.book = self.synthesizer.generate(self.mid_price(instrument.symbol), instrument.tick_size)

    def tick(self) -> Snapshot:
        """
        Advance the simulation by one step.

        Prices are finalized for every instrument before any PnL is computed,
        then the selected instrument's book is rebuilt from the new mid.
        """
        with self._lock:
            self.generator.advance_prices()
            self.generator.advance_candles()
            prices = self.generator.prices()
            total_pnl = self.ledger.recompute_pnl(prices)
            self._rebuild_book()
            self.tick_count += 1
            self.logger.debug(f"Tick {self.tick_count}: {self.selected.symbol} mid={self.book.mid_price:.4f} pnl={total_pnl:.2f}")
            return self._snapshot()

    def run_ticks(self, count: int) -> Snapshot:
        """Advance synchronously ``count`` times (no sleeping)"""
        if count < 0:
            raise ValueError("Tick count cannot be negative")
        for _ in range(count):
            self.tick()
        return self.get_snapshot()

    def select_instrument(self, index: int) -> Instrument:
        """Switch the displayed instrument and rebuild its book"""
        with self._lock:
            instrument = self.registry.get(index)
            self.selected_index = index
            self._rebuild_book()
            self.logger.info(f"Selected {instrument.symbol}")
            return instrument

    # --------------------------------------------------------------- lifecycle

    @property
    def is_running(self) -> bool:
        return self.ticker.is_running

    def register_tick_callback(self, callback: Callable[[Snapshot], None]):
        """Register renderer callback receiving the post-tick snapshot"""
        self.ticker.register_tick_callback(callback)

    async def start(self, max_ticks: Optional[int] = None):
        """Run the clock on the current event loop until ``stop()``"""
        await self.ticker.run(max_ticks)

    def stop(self):
        self.ticker.stop()

    # ----------------------------------------------------------------- actions

    def _resolve(self, symbol: Optional[str]) -> Instrument:
        return self.registry.by_symbol(symbol) if symbol else self.selected

    def place_order(self, side: OrderSide, order_type: OrderType, quantity: Any,
                    price: Any = None, leverage: Any = None,
                    symbol: Optional[str] = None) -> OrderResult:
        """
        Place an order on the selected instrument (or ``symbol``).

        Market orders execute at the current mid; limit/stop orders rest.
        Leverage defaults to the configured default, capped at the
        instrument's maximum.
        """
        with self._lock:
            instrument = self._resolve(symbol)
            if leverage is None:
                leverage = min(self.config.default_leverage, instrument.max_leverage)
            return self.ledger.place_order(
                instrument, side, order_type, quantity,
                price=price,
                mid_price=self.mid_price(instrument.symbol),
                leverage=leverage,
            )

    def cancel_order(self, order_id: str) -> Order:
        with self._lock:
            return self.ledger.cancel_order(order_id)

    def close_position(self, symbol: str) -> List[Position]:
        """Close all exposure in ``symbol`` at the current mark"""
        with self._lock:
            mark = self.mid_price(symbol) if symbol in self.registry else None
            return self.ledger.close_position(symbol, mark_price=mark)

    # ----------------------------------------------------------- order form

    def estimate_order(self, order_type: OrderType, quantity: Any, price: Any = None,
                       leverage: Optional[int] = None,
                       symbol: Optional[str] = None) -> OrderEstimate:
        """Notional, margin and fee for a prospective order"""
        with self._lock:
            instrument = self._resolve(symbol)
            if leverage is None:
                leverage = min(self.config.default_leverage, instrument.max_leverage)
            leverage = OrderValidator.validate_leverage(leverage, instrument)
            if order_type is OrderType.MARKET:
                price = self.mid_price(instrument.symbol)
            else:
                price = OrderValidator.validate_price(price, order_type)
            return self.estimator.estimate(quantity, price, leverage)

    def quick_quantity(self, fraction: float, symbol: Optional[str] = None) -> float:
        with self._lock:
            instrument = self._resolve(symbol)
            return self.estimator.quick_quantity(
                self.ledger.balance, self.mid_price(instrument.symbol), fraction
            )

    # ---------------------------------------------------------------- snapshot

    def _snapshot(self) -> Snapshot:
        return self.projector.project(self.selected_index, self.book, self.tick_count, self.clock())

    def get_snapshot(self) -> Snapshot:
        with self._lock:
            return self._snapshot()

    def get_status(self) -> Dict[str, Any]:
        """Compact session summary"""
        with self._lock:
            return {
                'selected_symbol': self.selected.symbol,
                'is_running': self.is_running,
                'tick_count': self.tick_count,
                'balance': self.ledger.balance,
                'total_pnl': self.ledger.total_unrealized_pnl,
                'open_positions': len(self.ledger.positions),
                'pending_orders': len(self.ledger.orders),
                'trades': len(self.ledger.trades),
                'clock': self.ticker.stats.copy(),
            }

    def __str__(self) -> str:
        return (f"SimulationEngine(Instruments: {len(self.registry)}, Selected: {self.selected.symbol}, "
                f"Ticks: {self.tick_count})")

    def __repr__(self) -> str:
        return self.__str__()
