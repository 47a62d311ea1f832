"""
Futures Simulator - a simulated perpetual-futures trading terminal core.

This package provides:
- Synthetic prices and candlestick history per instrument
- A synthesized order book around the live mid price
- A ledger of resting orders, positions and PnL against fabricated liquidity
- An asyncio simulation clock and read-only snapshots for renderers
"""

__version__ = "1.0.0"
__author__ = "Futures Simulator Team"

from typing import Optional

import numpy as np

from .core.types import OrderType, OrderSide, OrderStatus, PositionDirection, ExecutionStatus, AlertLevel
from .core.models import Instrument, Candle, PriceState, BookLevel, OrderBook, Order, Trade, OrderResult
from .core.exceptions import (
    FuturesSimulatorError, InvalidQuantityError, InvalidPriceError, InvalidLeverageError,
    InvalidInstrumentIndexError, UnknownInstrumentError, OrderNotFoundError,
    PositionNotFoundError, InvalidArgumentError, ConfigurationError
)
from .config.simulation_config import SimulationConfig, DEFAULT_CONFIG, FAST_CONFIG
from .market.instruments import InstrumentRegistry, DEFAULT_INSTRUMENTS
from .market.candles import CandleGenerator
from .market.orderbook import OrderBookSynthesizer
from .portfolio.position import Position
from .portfolio.ledger import Ledger
from .trading.engine import SimulationEngine
from .trading.snapshot import Snapshot
from .realtime.clock import SimulationClock
from .realtime.notifier import ActionNotifier, Notification


# Convenience factory functions
def create_engine(config: Optional[SimulationConfig] = None,
                  rng: Optional[np.random.Generator] = None) -> SimulationEngine:
    """Create an engine with the default instruments and an empty ledger"""
    return SimulationEngine(config or DEFAULT_CONFIG, rng=rng)


def create_demo_engine(config: Optional[SimulationConfig] = None,
                       rng: Optional[np.random.Generator] = None) -> SimulationEngine:
    """Create an engine pre-loaded with the terminal's starting positions and orders"""
    engine = create_engine(config, rng)
    ledger = engine.ledger

    ledger.seed_position("BTC-PERP", PositionDirection.LONG, 0.05, 67200.0, 62800.0)
    ledger.seed_position("ETH-PERP", PositionDirection.SHORT, 0.8, 3580.0, 3760.0)
    ledger.seed_order(Order(symbol="BTC-PERP", side=OrderSide.BUY, order_type=OrderType.LIMIT,
                            quantity=0.1, price=66500.0, id="ORD001"))
    ledger.seed_order(Order(symbol="SOL-PERP", side=OrderSide.SELL, order_type=OrderType.LIMIT,
                            quantity=5.0, price=190.0, id="ORD002"))
    return engine


__all__ = [
    # Core types
    'OrderType', 'OrderSide', 'OrderStatus', 'PositionDirection', 'ExecutionStatus', 'AlertLevel',
    # Core models
    'Instrument', 'Candle', 'PriceState', 'BookLevel', 'OrderBook', 'Order', 'Trade', 'OrderResult',
    # Errors
    'FuturesSimulatorError', 'InvalidQuantityError', 'InvalidPriceError', 'InvalidLeverageError',
    'InvalidInstrumentIndexError', 'UnknownInstrumentError', 'OrderNotFoundError',
    'PositionNotFoundError', 'InvalidArgumentError', 'ConfigurationError',
    # Configuration
    'SimulationConfig', 'DEFAULT_CONFIG', 'FAST_CONFIG',
    # Main components
    'InstrumentRegistry', 'DEFAULT_INSTRUMENTS', 'CandleGenerator', 'OrderBookSynthesizer',
    'Position', 'Ledger', 'SimulationEngine', 'Snapshot',
    # Real-time
    'SimulationClock', 'ActionNotifier', 'Notification',
    # Convenience functions
    'create_engine', 'create_demo_engine'
]
