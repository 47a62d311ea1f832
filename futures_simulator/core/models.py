"""
Core data models for the futures simulator.
Contains all dataclasses and model definitions.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING
from datetime import datetime
import uuid

from .types import (
    OrderType, OrderSide, OrderStatus, ExecutionStatus
)

if TYPE_CHECKING:
    from ..portfolio.position import Position


def generate_order_id() -> str:
    """Short exchange-style order id, e.g. ORD3F9A1C2B"""
    return "ORD" + uuid.uuid4().hex[:8].upper()


@dataclass(frozen=True)
class Instrument:
    """Tradable perpetual contract"""
    symbol: str
    base_price: float
    max_leverage: int
    tick_size: float

    def __post_init__(self):
        if not self.symbol or not self.symbol.strip():
            raise ValueError("Instrument symbol cannot be empty")
        if self.base_price <= 0:
            raise ValueError(f"Base price must be positive for {self.symbol}")
        if int(self.max_leverage) != self.max_leverage or self.max_leverage < 1:
            raise ValueError(f"Max leverage must be an integer >= 1 for {self.symbol}")
        if self.tick_size <= 0:
            raise ValueError(f"Tick size must be positive for {self.symbol}")

    @property
    def base_asset(self) -> str:
        """Asset the contract is quoted in units of (BTC for BTC-PERP)"""
        return self.symbol.split("-")[0]


@dataclass
class Candle:
    """One fixed-duration OHLCV bar"""
    open_time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @property
    def is_bullish(self) -> bool:
        return self.close >= self.open

    @property
    def body_size(self) -> float:
        """Size of the candlestick body"""
        return abs(self.close - self.open)

    @property
    def total_range(self) -> float:
        """Total price range of the candle"""
        return self.high - self.low

    def is_consistent(self) -> bool:
        """High/low envelope the body and all prices are positive"""
        return (
            min(self.open, self.high, self.low, self.close) > 0
            and self.high >= max(self.open, self.close)
            and self.low <= min(self.open, self.close)
            and self.volume >= 0
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'open_time': self.open_time.isoformat(),
            'open': self.open,
            'high': self.high,
            'low': self.low,
            'close': self.close,
            'volume': self.volume,
        }


@dataclass
class PriceState:
    """Last-trade view of an instrument"""
    symbol: str
    last_price: float
    last_delta: float = 0.0
    percent_change: float = 0.0
    rolling_volume: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'symbol': self.symbol,
            'last_price': self.last_price,
            'last_delta': self.last_delta,
            'percent_change': self.percent_change,
            'rolling_volume': self.rolling_volume,
        }


@dataclass(frozen=True)
class BookLevel:
    """Single synthesized price level"""
    price: float
    size: float
    cumulative: float  # running notional from the best level outward

    @property
    def notional(self) -> float:
        return self.price * self.size


@dataclass(frozen=True)
class OrderBook:
    """Synthetic ladder around a mid price. Asks ascend, bids descend."""
    mid_price: float
    asks: Tuple[BookLevel, ...] = ()
    bids: Tuple[BookLevel, ...] = ()

    @property
    def best_ask(self) -> Optional[float]:
        return self.asks[0].price if self.asks else None

    @property
    def best_bid(self) -> Optional[float]:
        return self.bids[0].price if self.bids else None

    @property
    def spread(self) -> Optional[float]:
        if self.best_ask is None or self.best_bid is None:
            return None
        return self.best_ask - self.best_bid

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mid_price': self.mid_price,
            'asks': [{'price': l.price, 'size': l.size, 'total': l.cumulative} for l in self.asks],
            'bids': [{'price': l.price, 'size': l.size, 'total': l.cumulative} for l in self.bids],
        }


@dataclass
class Order:
    """Resting limit/stop order"""
    symbol: str
    side: OrderSide
    order_type: OrderType
    quantity: float
    price: Optional[float] = None
    id: str = field(default_factory=generate_order_id)
    status: OrderStatus = OrderStatus.OPEN
    leverage: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def notional(self) -> float:
        return self.quantity * (self.price or 0.0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'symbol': self.symbol,
            'side': self.side.value,
            'type': self.order_type.value,
            'price': self.price,
            'quantity': self.quantity,
            'status': self.status.value,
            'leverage': self.leverage,
            'created_at': self.created_at.isoformat(),
        }


@dataclass
class Trade:
    """Represents a market fill or a position close"""
    symbol: str
    side: OrderSide
    quantity: float
    price: float
    order_id: str = ""
    realized_pnl: Optional[float] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'symbol': self.symbol,
            'side': self.side.value,
            'quantity': self.quantity,
            'price': self.price,
            'order_id': self.order_id,
            'realized_pnl': self.realized_pnl,
            'timestamp': self.timestamp.isoformat(),
        }


@dataclass
class Account:
    """Session account. The balance is never debited in the simulation."""
    balance: float
    initial_balance: float = 0.0

    def __post_init__(self):
        if self.balance <= 0:
            raise ValueError("Initial balance must be positive")
        if not self.initial_balance:
            self.initial_balance = self.balance


@dataclass(frozen=True)
class OrderResult:
    """What happened to a placed order"""
    status: ExecutionStatus
    symbol: str
    side: OrderSide
    order_type: OrderType
    quantity: float
    price: float  # fill price for market orders, limit/stop price otherwise
    order: Optional[Order] = None
    position: Optional["Position"] = None

    @property
    def executed(self) -> bool:
        return self.status is ExecutionStatus.EXECUTED


@dataclass(frozen=True)
class OrderEstimate:
    """Pre-trade cost figures shown next to the order form"""
    notional: float
    margin: float
    fee: float
    leverage: int

    def to_dict(self) -> Dict[str, float]:
        return {
            'notional': self.notional,
            'margin': self.margin,
            'fee': self.fee,
            'leverage': self.leverage,
        }
