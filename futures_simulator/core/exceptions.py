"""
Custom exceptions for the futures simulator.
"""

from typing import Any, Optional


class FuturesSimulatorError(Exception):
    """Base exception for futures simulator"""
    pass


class InvalidQuantityError(FuturesSimulatorError):
    """Raised when an order quantity is missing, non-finite or not positive"""
    def __init__(self, quantity: Any):
        self.quantity = quantity
        super().__init__(f"Invalid quantity: {quantity!r} (must be a positive number)")


class InvalidPriceError(FuturesSimulatorError):
    """Raised when a limit/stop order has no usable price"""
    def __init__(self, price: Any, order_type: Optional[str] = None):
        self.price = price
        self.order_type = order_type
        kind = f"{order_type} order " if order_type else ""
        super().__init__(f"Invalid {kind}price: {price!r} (must be a finite positive number)")


class InvalidLeverageError(FuturesSimulatorError):
    """Raised when leverage falls outside the instrument's allowed range"""
    def __init__(self, leverage: Any, max_leverage: int):
        self.leverage = leverage
        self.max_leverage = max_leverage
        super().__init__(f"Invalid leverage: {leverage!r} (allowed 1-{max_leverage}x)")


class InvalidInstrumentIndexError(FuturesSimulatorError):
    """Raised when selecting an instrument index outside the registry"""
    def __init__(self, index: Any, count: int):
        self.index = index
        self.count = count
        super().__init__(f"Instrument index {index!r} out of range (0-{count - 1})")


class UnknownInstrumentError(FuturesSimulatorError):
    """Raised when a symbol is not in the instrument registry"""
    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Unknown instrument: {symbol}")


class OrderNotFoundError(FuturesSimulatorError):
    """Raised when cancelling an order that is not resting"""
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class PositionNotFoundError(FuturesSimulatorError):
    """Raised when closing a symbol with no open position"""
    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"No open position for {symbol}")


class InvalidArgumentError(FuturesSimulatorError, ValueError):
    """Raised for invalid inputs to market synthesis (e.g. non-positive mid price)"""
    pass


class ConfigurationError(FuturesSimulatorError):
    """Raised when simulation configuration is invalid"""
    pass
