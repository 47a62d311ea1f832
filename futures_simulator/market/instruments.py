"""
Static registry of tradable perpetual instruments.
"""

from typing import Dict, Iterator, List, Sequence

from ..core.models import Instrument
from ..core.exceptions import InvalidInstrumentIndexError, UnknownInstrumentError


DEFAULT_INSTRUMENTS = (
    Instrument("BTC-PERP", 67840.0, 125, 0.5),
    Instrument("ETH-PERP", 3520.0, 100, 0.01),
    Instrument("SOL-PERP", 185.4, 50, 0.01),
    Instrument("BNB-PERP", 592.0, 50, 0.01),
    Instrument("XRP-PERP", 0.614, 50, 0.0001),
)


class InstrumentRegistry:
    """Ordered, immutable set of instruments addressable by index or symbol"""

    def __init__(self, instruments: Sequence[Instrument] = DEFAULT_INSTRUMENTS):
        if not instruments:
            raise ValueError("Registry needs at least one instrument")

        self._instruments: List[Instrument] = list(instruments)
        self._by_symbol: Dict[str, Instrument] = {}
        for instrument in self._instruments:
            if instrument.symbol in self._by_symbol:
                raise ValueError(f"Duplicate instrument symbol: {instrument.symbol}")
            self._by_symbol[instrument.symbol] = instrument

    def get(self, index: int) -> Instrument:
        """Instrument at a registry index"""
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidInstrumentIndexError(index, len(self._instruments))
        if index < 0 or index >= len(self._instruments):
            raise InvalidInstrumentIndexError(index, len(self._instruments))
        return self._instruments[index]

    def by_symbol(self, symbol: str) -> Instrument:
        if symbol not in self._by_symbol:
            raise UnknownInstrumentError(symbol)
        return self._by_symbol[symbol]

    def index_of(self, symbol: str) -> int:
        return self._instruments.index(self.by_symbol(symbol))

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._by_symbol

    @property
    def symbols(self) -> List[str]:
        return [i.symbol for i in self._instruments]

    @property
    def instruments(self) -> List[Instrument]:
        return list(self._instruments)

    def __iter__(self) -> Iterator[Instrument]:
        return iter(self._instruments)

    def __len__(self) -> int:
        return len(self._instruments)

    def __repr__(self) -> str:
        return f"InstrumentRegistry({', '.join(self.symbols)})"
