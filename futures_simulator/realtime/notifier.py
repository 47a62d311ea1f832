"""
User-facing notifications for terminal actions.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
import logging
from typing import Any, Callable, Deque, Dict, List, Optional, TYPE_CHECKING

from ..core.exceptions import (
    FuturesSimulatorError, InvalidQuantityError, InvalidPriceError
)
from ..core.models import OrderResult
from ..core.types import AlertLevel, OrderSide, OrderType

if TYPE_CHECKING:
    from ..trading.engine import SimulationEngine


def format_price(value: float, decimals: Optional[int] = None) -> str:
    """Thousands-separated price; small prices get four decimals"""
    if decimals is None:
        decimals = 2 if abs(value) > 10 else 4
    return f"{value:,.{decimals}f}"


@dataclass
class Notification:
    """Short message shown to the user after an action"""
    level: AlertLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)
    result: Any = None

    def __str__(self) -> str:
        return f"[{self.level.value.upper()}] {self.message}"

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization"""
        return {
            'level': self.level.value,
            'message': self.message,
            'timestamp': self.timestamp.isoformat(),
        }


class ActionNotifier:
    """Runs user actions against an engine and reports each outcome as a Notification"""

    def __init__(self, engine: "SimulationEngine", history_size: int = 50):
        self.engine = engine
        self.history: Deque[Notification] = deque(maxlen=history_size)
        self.callbacks: List[Callable[[Notification], None]] = []
        self.logger = logging.getLogger(__name__)

    def register_callback(self, callback: Callable[[Notification], None]):
        """Register callback for every new notification"""
        if not callable(callback):
            raise ValueError("Callback must be callable")
        self.callbacks.append(callback)

    @property
    def latest(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None

    def _emit(self, level: AlertLevel, message: str, result: Any = None) -> Notification:
        notification = Notification(level=level, message=message, result=result)
        self.history.append(notification)
        for callback in self.callbacks:
            try:
                callback(notification)
            except Exception as e:
                self.logger.error(f"Error in notification callback: {e}")
        return notification

    def _error(self, error: FuturesSimulatorError) -> Notification:
        if isinstance(error, InvalidQuantityError):
            message = "Enter valid quantity"
        elif isinstance(error, InvalidPriceError):
            message = "Enter valid price"
        else:
            message = str(error)
        self.logger.info(f"Rejected action: {error}")
        return self._emit(AlertLevel.ERROR, message)

    @staticmethod
    def describe_order(result: OrderResult) -> str:
        side = result.side.value.upper()
        if result.executed:
            return f"Market {side} executed @ {format_price(result.price)}"
        kind = result.order_type.value.capitalize()
        return (f"{kind} order placed: {side} {result.quantity:g} {result.symbol} "
                f"@ {format_price(result.price, 2)}")

    def place_order(self, side: OrderSide, order_type: OrderType, quantity: Any,
                    price: Any = None, leverage: Any = None,
                    symbol: Optional[str] = None) -> Notification:
        try:
            result = self.engine.place_order(side, order_type, quantity, price=price,
                                             leverage=leverage, symbol=symbol)
        except FuturesSimulatorError as e:
            return self._error(e)
        return self._emit(AlertLevel.SUCCESS, self.describe_order(result), result)

    def cancel_order(self, order_id: str) -> Notification:
        try:
            order = self.engine.cancel_order(order_id)
        except FuturesSimulatorError as e:
            return self._error(e)
        return self._emit(AlertLevel.INFO, "Order cancelled", order)

    def close_position(self, symbol: str) -> Notification:
        try:
            closed = self.engine.close_position(symbol)
        except FuturesSimulatorError as e:
            return self._error(e)
        return self._emit(AlertLevel.SUCCESS, f"Position closed: {symbol}", closed)

    def select_instrument(self, index: int) -> Notification:
        try:
            instrument = self.engine.select_instrument(index)
        except FuturesSimulatorError as e:
            return self._error(e)
        return self._emit(AlertLevel.INFO, f"Switched to {instrument.symbol}", instrument)

    def get_recent(self, count: int = 10) -> List[Dict]:
        return [n.to_dict() for n in list(self.history)[-count:]]
