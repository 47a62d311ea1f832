"""
Order and position ledger.

The ledger exclusively owns resting orders, open positions and the trade log.
User actions change its structure (create/grow/remove); the simulation tick
only ever writes ``Position.unrealized_pnl``.
"""

import logging
import math
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .position import Position, liquidation_price
from ..core.models import Account, Instrument, Order, OrderResult, Trade, generate_order_id
from ..core.types import ExecutionStatus, OrderSide, OrderType, PositionDirection
from ..core.validation import OrderValidator
from ..core.exceptions import (
    InvalidArgumentError, OrderNotFoundError, PositionNotFoundError
)


class Ledger:
    """Tracks resting orders, open positions and executed trades"""

    def __init__(self, initial_balance: float, average_entry: bool = False,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Args:
            initial_balance: Account balance shown to the user
            average_entry: Re-average entry price on same-side fills instead of
                keeping the first fill's entry
            clock: Returns the current time
        """
        self.account = Account(balance=initial_balance)
        self.average_entry = average_entry
        self.clock = clock
        self.positions: List[Position] = []
        self.orders: List[Order] = []
        self.trades: List[Trade] = []
        self.logger = logging.getLogger(__name__)

    @property
    def balance(self) -> float:
        return self.account.balance

    @property
    def total_unrealized_pnl(self) -> float:
        """Sum of position PnL; positions not yet marked count as zero"""
        return sum(p.unrealized_pnl or 0.0 for p in self.positions)

    @property
    def equity(self) -> float:
        return self.account.balance + self.total_unrealized_pnl

    def get_positions(self, symbol: Optional[str] = None) -> List[Position]:
        if symbol is None:
            return list(self.positions)
        return [p for p in self.positions if p.symbol == symbol]

    def find_position(self, symbol: str, direction: PositionDirection) -> Optional[Position]:
        for position in self.positions:
            if position.symbol == symbol and position.direction is direction:
                return position
        return None

    def get_order(self, order_id: str) -> Optional[Order]:
        for order in self.orders:
            if order.id == order_id:
                return order
        return None

    def _new_order_id(self) -> str:
        order_id = generate_order_id()
        while self.get_order(order_id) is not None:
            order_id = generate_order_id()
        return order_id

    def place_order(self, instrument: Instrument, side: OrderSide, order_type: OrderType,
                    quantity: Any, price: Any = None, mid_price: Optional[float] = None,
                    leverage: Any = None) -> OrderResult:
        """
        Place an order against the simulated market.

        Market orders fill immediately at ``mid_price`` into a position and are
        not kept as orders. Limit and stop orders rest until cancelled; nothing
        ever fills them.

        Raises:
            InvalidQuantityError: quantity missing, non-finite or not positive
            InvalidPriceError: limit/stop order without a finite positive price
            InvalidLeverageError: leverage outside 1..max_leverage
            InvalidArgumentError: market order without a usable mid price
        """
        quantity, price, leverage = OrderValidator.validate(
            instrument, order_type, quantity, price, leverage
        )

        if order_type is OrderType.MARKET:
            if mid_price is None or not math.isfinite(mid_price) or mid_price <= 0:
                raise InvalidArgumentError(f"No valid mid price to execute {instrument.symbol} market order")
            return self._execute_market(instrument, side, quantity, mid_price, leverage)

        order = Order(
            symbol=instrument.symbol,
            side=side,
            order_type=order_type,
            quantity=quantity,
            price=price,
            id=self._new_order_id(),
            leverage=leverage,
            created_at=self.clock(),
        )
        self.orders.append(order)
        self.logger.info(f"Accepted {order_type.value} {side.value} {quantity} {instrument.symbol} @ {price} ({order.id})")

        return OrderResult(
            status=ExecutionStatus.ACCEPTED,
            symbol=instrument.symbol,
            side=side,
            order_type=order_type,
            quantity=quantity,
            price=price,
            order=order,
        )

    def _execute_market(self, instrument: Instrument, side: OrderSide, quantity: float,
                        fill_price: float, leverage: Optional[int]) -> OrderResult:
        direction = side.direction
        position = self.find_position(instrument.symbol, direction)

        if position is not None:
            if self.average_entry:
                total_cost = position.size * position.entry_price + quantity * fill_price
                position.entry_price = total_cost / (position.size + quantity)
                position.liquidation_price = liquidation_price(position.entry_price, direction)
            position.add_size(quantity)
        else:
            position = Position(
                symbol=instrument.symbol,
                direction=direction,
                size=quantity,
                entry_price=fill_price,
                liquidation_price=liquidation_price(fill_price, direction),
                unrealized_pnl=0.0,
                opened_at=self.clock(),
            )
            self.positions.append(position)

        order_id = self._new_order_id()
        self.trades.append(Trade(
            symbol=instrument.symbol,
            side=side,
            quantity=quantity,
            price=fill_price,
            order_id=order_id,
            timestamp=self.clock(),
        ))
        self.logger.info(f"Executed market {side.value} {quantity} {instrument.symbol} @ {fill_price:.4f}")

        return OrderResult(
            status=ExecutionStatus.EXECUTED,
            symbol=instrument.symbol,
            side=side,
            order_type=OrderType.MARKET,
            quantity=quantity,
            price=fill_price,
            position=position,
        )

    def cancel_order(self, order_id: str) -> Order:
        """Remove a resting order"""
        order = self.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        self.orders.remove(order)
        self.logger.info(f"Cancelled order {order_id}")
        return order

    def close_position(self, symbol: str, mark_price: Optional[float] = None) -> List[Position]:
        """
        Close every position in a symbol, long and short alike.

        A closing trade is logged per position; its realized PnL is only
        filled in when a mark price is known. The balance is not credited.
        """
        closing = self.get_positions(symbol)
        if not closing:
            raise PositionNotFoundError(symbol)

        self.positions = [p for p in self.positions if p.symbol != symbol]
        has_mark = mark_price is not None and mark_price > 0
        for position in closing:
            self.trades.append(Trade(
                symbol=symbol,
                side=position.direction.closing_side,
                quantity=position.size,
                price=mark_price if has_mark else position.entry_price,
                realized_pnl=position.pnl_at(mark_price) if has_mark else None,
                timestamp=self.clock(),
            ))

        self.logger.info(f"Closed {len(closing)} position(s) in {symbol}")
        return closing

    def recompute_pnl(self, price_by_symbol: Dict[str, float]) -> float:
        """
        Mark every position to the given prices.

        A symbol with no (or a zero) price is skipped for this pass and keeps
        its previous value.

        Returns:
            Aggregate unrealized PnL
        """
        for position in self.positions:
            mark = price_by_symbol.get(position.symbol, 0.0)
            if not mark:
                continue
            position.unrealized_pnl = position.pnl_at(mark)
        return self.total_unrealized_pnl

    def seed_position(self, symbol: str, direction: PositionDirection, size: float,
                      entry_price: float, liquidation: Optional[float] = None) -> Position:
        """Add a pre-existing position (demo/start-up state)"""
        position = Position(
            symbol=symbol,
            direction=direction,
            size=size,
            entry_price=entry_price,
            liquidation_price=liquidation or liquidation_price(entry_price, direction),
            opened_at=self.clock(),
        )
        self.positions.append(position)
        return position

    def seed_order(self, order: Order) -> Order:
        """Add a pre-existing resting order (demo/start-up state)"""
        if self.get_order(order.id) is not None:
            raise ValueError(f"Duplicate order id: {order.id}")
        self.orders.append(order)
        return order

    def __str__(self) -> str:
        return (f"Ledger(Balance: ${self.balance:.2f}, Positions: {len(self.positions)}, "
                f"Orders: {len(self.orders)}, Trades: {len(self.trades)})")

    def __repr__(self) -> str:
        return self.__str__()
