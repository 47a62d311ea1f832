"""
Real-time components: the simulation clock and user notifications.
"""

from .clock import SimulationClock
from .notifier import ActionNotifier, Notification, format_price

__all__ = [
    'SimulationClock',
    'ActionNotifier',
    'Notification',
    'format_price'
]
