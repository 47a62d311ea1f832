"""
Read-only views of simulation state for renderers.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from ..core.models import Candle, Instrument, Order, OrderBook, PriceState, Trade
from ..market.candles import CandleGenerator, candles_to_frame
from ..portfolio.ledger import Ledger
from ..portfolio.position import Position


@dataclass(frozen=True)
class Snapshot:
    """Everything a renderer needs to draw one frame"""
    instruments: Tuple[Instrument, ...]
    selected_index: int
    price_by_symbol: Dict[str, PriceState]
    candles_by_symbol: Dict[str, List[Candle]]
    book: Optional[OrderBook]
    positions: Tuple[Position, ...]
    orders: Tuple[Order, ...]
    trades: Tuple[Trade, ...]
    balance: float
    total_pnl: float
    tick_count: int
    generated_at: datetime

    @property
    def selected(self) -> Instrument:
        return self.instruments[self.selected_index]

    @property
    def selected_symbol(self) -> str:
        return self.selected.symbol

    @property
    def equity(self) -> float:
        return self.balance + self.total_pnl

    def mark_price(self, symbol: str) -> Optional[float]:
        state = self.price_by_symbol.get(symbol)
        return state.last_price if state is not None else None

    def candles_frame(self, symbol: Optional[str] = None) -> pd.DataFrame:
        """OHLCV DataFrame for a symbol (selected instrument by default)"""
        return candles_to_frame(self.candles_by_symbol.get(symbol or self.selected_symbol, []))

    def positions_frame(self) -> pd.DataFrame:
        """Positions table with mark price alongside"""
        rows = []
        for position in self.positions:
            row = position.to_dict()
            row['mark_price'] = self.mark_price(position.symbol)
            rows.append(row)
        columns = ['symbol', 'direction', 'size', 'entry_price', 'mark_price',
                   'liquidation_price', 'unrealized_pnl', 'opened_at']
        return pd.DataFrame(rows, columns=columns)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'instruments': [
                {'symbol': i.symbol, 'base_price': i.base_price,
                 'max_leverage': i.max_leverage, 'tick_size': i.tick_size}
                for i in self.instruments
            ],
            'selected_symbol': self.selected_symbol,
            'prices': {s: p.to_dict() for s, p in self.price_by_symbol.items()},
            'candles': {s: [c.to_dict() for c in cs] for s, cs in self.candles_by_symbol.items()},
            'book': self.book.to_dict() if self.book is not None else None,
            'positions': [p.to_dict() for p in self.positions],
            'orders': [o.to_dict() for o in self.orders],
            'trades': [t.to_dict() for t in self.trades],
            'balance': self.balance,
            'total_pnl': self.total_pnl,
            'tick_count': self.tick_count,
            'generated_at': self.generated_at.isoformat(),
        }


class SnapshotProjector:
    """Copies live state into a Snapshot so renderers never hold mutable references"""

    def __init__(self, instruments: List[Instrument], generator: CandleGenerator, ledger: Ledger):
        self.instruments = tuple(instruments)
        self.generator = generator
        self.ledger = ledger

    def project(self, selected_index: int, book: Optional[OrderBook],
                tick_count: int, generated_at: datetime) -> Snapshot:
        prices = {s: replace(p) for s, p in self.generator.price_states.items()}
        candles = {
            i.symbol: [replace(c) for c in self.generator.candles(i.symbol)]
            for i in self.instruments
        }
        positions = tuple(replace(p) for p in self.ledger.positions)

        return Snapshot(
            instruments=self.instruments,
            selected_index=selected_index,
            price_by_symbol=prices,
            candles_by_symbol=candles,
            book=book,
            positions=positions,
            orders=tuple(replace(o) for o in self.ledger.orders),
            trades=tuple(replace(t) for t in self.ledger.trades),
            balance=self.ledger.balance,
            total_pnl=sum(p.unrealized_pnl or 0.0 for p in positions),
            tick_count=tick_count,
            generated_at=generated_at,
        )
