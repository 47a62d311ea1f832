"""
Order input validation.

Every check raises before anything is mutated, so a rejected order leaves the
ledger exactly as it was.
"""

import math
from numbers import Real
from typing import Any, Optional

from .models import Instrument
from .types import OrderType
from .exceptions import InvalidQuantityError, InvalidPriceError, InvalidLeverageError


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value) and value > 0


class OrderValidator:
    """Validate orders before placement"""

    @staticmethod
    def validate_quantity(quantity: Any) -> float:
        if not _is_positive_number(quantity):
            raise InvalidQuantityError(quantity)
        return float(quantity)

    @staticmethod
    def validate_price(price: Any, order_type: OrderType) -> Optional[float]:
        """Limit/stop orders need a finite positive price; market orders ignore it"""
        if not order_type.is_resting:
            return None
        if not _is_positive_number(price):
            raise InvalidPriceError(price, order_type.value)
        return float(price)

    @staticmethod
    def validate_leverage(leverage: Any, instrument: Instrument) -> Optional[int]:
        if leverage is None:
            return None
        if not _is_positive_number(leverage) or int(leverage) != leverage:
            raise InvalidLeverageError(leverage, instrument.max_leverage)
        if leverage < 1 or leverage > instrument.max_leverage:
            raise InvalidLeverageError(leverage, instrument.max_leverage)
        return int(leverage)

    @staticmethod
    def validate(instrument: Instrument, order_type: OrderType, quantity: Any,
                 price: Any = None, leverage: Any = None):
        """
        Validate a complete order.

        Returns:
            Tuple of normalized (quantity, price, leverage)

        Raises:
            InvalidQuantityError, InvalidPriceError, InvalidLeverageError
        """
        return (
            OrderValidator.validate_quantity(quantity),
            OrderValidator.validate_price(price, order_type),
            OrderValidator.validate_leverage(leverage, instrument),
        )
