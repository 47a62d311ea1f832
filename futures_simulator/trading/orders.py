"""
Pre-trade estimates for the order form.
"""

from ..core.models import OrderEstimate
from ..core.validation import OrderValidator


DEFAULT_FEE_RATE = 0.0002  # 0.02% taker fee
QUICK_SIZE_BALANCE_FRACTION = 0.1


class OrderEstimator:
    """Margin, notional and fee figures for a prospective order"""

    def __init__(self, fee_rate: float = DEFAULT_FEE_RATE):
        if fee_rate < 0:
            raise ValueError("Fee rate cannot be negative")
        self.fee_rate = fee_rate

    def estimate(self, quantity: float, price: float, leverage: int) -> OrderEstimate:
        """
        Args:
            quantity: Contract quantity in base-asset units
            price: Limit/stop price, or the current mark for market orders
            leverage: Chosen leverage (>= 1)

        Returns:
            OrderEstimate with notional = quantity * price, margin = notional /
            leverage and fee = notional * fee_rate
        """
        quantity = OrderValidator.validate_quantity(quantity)
        if price <= 0:
            raise ValueError("Price must be positive")
        if leverage < 1:
            raise ValueError("Leverage must be at least 1")

        notional = quantity * price
        return OrderEstimate(
            notional=notional,
            margin=notional / leverage,
            fee=notional * self.fee_rate,
            leverage=int(leverage),
        )

    @staticmethod
    def quick_quantity(balance: float, price: float, fraction: float) -> float:
        """Quantity for the 25/50/75/100% buttons: a fraction of 10% of balance"""
        if price <= 0:
            raise ValueError("Price must be positive")
        if not 0 < fraction <= 1:
            raise ValueError("Fraction must be in (0, 1]")
        max_quantity = balance * QUICK_SIZE_BALANCE_FRACTION / price
        return round(max_quantity * fraction, 4)
