"""Synthetic market data: instruments, candles and order book depth."""

from .instruments import InstrumentRegistry, DEFAULT_INSTRUMENTS
from .candles import CandleGenerator, CandleSeries, candles_to_frame
from .orderbook import OrderBookSynthesizer

__all__ = [
    'InstrumentRegistry', 'DEFAULT_INSTRUMENTS',
    'CandleGenerator', 'CandleSeries', 'candles_to_frame',
    'OrderBookSynthesizer'
]
