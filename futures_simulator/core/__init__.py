"""Core components of the futures simulator."""

from .types import (
    OrderType, OrderSide, OrderStatus, PositionDirection, ExecutionStatus, AlertLevel
)
from .models import (
    Instrument, Candle, PriceState, BookLevel, OrderBook, Order,
    Trade, Account, OrderResult, OrderEstimate
)
from .exceptions import (
    FuturesSimulatorError, InvalidQuantityError, InvalidPriceError,
    InvalidLeverageError, InvalidInstrumentIndexError, UnknownInstrumentError,
    OrderNotFoundError, PositionNotFoundError, InvalidArgumentError,
    ConfigurationError
)

__all__ = [
    'OrderType', 'OrderSide', 'OrderStatus', 'PositionDirection',
    'ExecutionStatus', 'AlertLevel',
    'Instrument', 'Candle', 'PriceState', 'BookLevel', 'OrderBook', 'Order',
    'Trade', 'Account', 'OrderResult', 'OrderEstimate',
    'FuturesSimulatorError', 'InvalidQuantityError', 'InvalidPriceError',
    'InvalidLeverageError', 'InvalidInstrumentIndexError', 'UnknownInstrumentError',
    'OrderNotFoundError', 'PositionNotFoundError', 'InvalidArgumentError',
    'ConfigurationError'
]
