"""
Open perpetual positions.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..core.types import PositionDirection


LONG_LIQUIDATION_FACTOR = 0.9
SHORT_LIQUIDATION_FACTOR = 1.1


def liquidation_price(entry_price: float, direction: PositionDirection) -> float:
    """Illustrative liquidation level, not derived from any margin model"""
    factor = LONG_LIQUIDATION_FACTOR if direction is PositionDirection.LONG else SHORT_LIQUIDATION_FACTOR
    return entry_price * factor


@dataclass
class Position:
    """Represents one (symbol, direction) exposure"""
    symbol: str
    direction: PositionDirection
    size: float
    entry_price: float
    liquidation_price: float = 0.0
    unrealized_pnl: Optional[float] = None
    opened_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if self.size <= 0:
            raise ValueError("Position size must be positive")
        if self.entry_price <= 0:
            raise ValueError("Entry price must be positive")
        if not self.liquidation_price:
            self.liquidation_price = liquidation_price(self.entry_price, self.direction)

    @property
    def is_long(self) -> bool:
        return self.direction is PositionDirection.LONG

    def pnl_at(self, mark_price: float) -> float:
        """Unrealized profit/loss at a mark price"""
        if self.is_long:
            return (mark_price - self.entry_price) * self.size
        return (self.entry_price - mark_price) * self.size

    def notional(self, mark_price: float) -> float:
        return self.size * mark_price

    def pnl_percent(self, mark_price: float) -> float:
        return self.pnl_at(mark_price) / (self.size * self.entry_price) * 100

    def add_size(self, quantity: float) -> None:
        """Grow the position without touching entry price"""
        if quantity <= 0:
            raise ValueError("Quantity must be positive")
        self.size += quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            'symbol': self.symbol,
            'direction': self.direction.value,
            'size': self.size,
            'entry_price': self.entry_price,
            'liquidation_price': self.liquidation_price,
            'unrealized_pnl': self.unrealized_pnl,
            'opened_at': self.opened_at.isoformat(),
        }

    def __str__(self) -> str:
        return f"Position({self.symbol} {self.direction.value.upper()}: {self.size} @ ${self.entry_price:.2f})"

    def __repr__(self) -> str:
        return self.__str__()
