"""Position and ledger management components."""

from .position import Position, liquidation_price
from .ledger import Ledger

__all__ = ['Position', 'liquidation_price', 'Ledger']
