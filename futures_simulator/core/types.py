"""
Core type definitions for the futures simulator.
Contains all enums and basic type definitions.
"""

from enum import Enum


class OrderType(Enum):
    """Types of orders that can be placed"""
    MARKET = "market"
    LIMIT = "limit"
    STOP = "stop"

    @property
    def is_resting(self) -> bool:
        """Limit and stop orders rest until cancelled"""
        return self in (OrderType.LIMIT, OrderType.STOP)


class OrderSide(Enum):
    """Side of the order - buy or sell"""
    BUY = "buy"
    SELL = "sell"

    @property
    def direction(self) -> "PositionDirection":
        """Position direction opened by this side"""
        return PositionDirection.LONG if self is OrderSide.BUY else PositionDirection.SHORT


class OrderStatus(Enum):
    """Resting order status. Only open orders are modelled."""
    OPEN = "Open"


class PositionDirection(Enum):
    """Direction of an open position"""
    LONG = "long"
    SHORT = "short"

    @property
    def closing_side(self) -> OrderSide:
        """Order side that would close a position in this direction"""
        return OrderSide.SELL if self is PositionDirection.LONG else OrderSide.BUY


class ExecutionStatus(Enum):
    """Outcome of a successfully placed order"""
    EXECUTED = "executed"
    ACCEPTED = "accepted"


class AlertLevel(Enum):
    """Category of a user-facing notification"""
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
