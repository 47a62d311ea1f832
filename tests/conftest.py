"""
Pytest configuration and shared fixtures.
"""

import pytest
from datetime import datetime, timedelta
import numpy as np

from futures_simulator.config.simulation_config import SimulationConfig
from futures_simulator.core.models import Instrument
from futures_simulator.market.instruments import InstrumentRegistry
from futures_simulator.portfolio.ledger import Ledger
from futures_simulator.trading.engine import SimulationEngine


class FixedRandom:
    """Random source replaying a fixed cycle of values"""

    def __init__(self, *values):
        self.values = list(values) or [0.5]
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


class ManualClock:
    """Clock that only moves when told to"""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def btc():
    return Instrument("BTC-PERP", 67840.0, 125, 0.5)


@pytest.fixture
def eth():
    return Instrument("ETH-PERP", 3520.0, 100, 0.01)


@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.fixture
def seeded_rng():
    return np.random.default_rng(1234)


@pytest.fixture
def sample_config():
    return SimulationConfig(tick_interval_ms=0, seed=42)


@pytest.fixture
def sample_ledger(manual_clock):
    return Ledger(initial_balance=25000.0, clock=manual_clock)


@pytest.fixture
def sample_engine(sample_config, manual_clock):
    """Engine with deterministic randomness and a manual clock"""
    return SimulationEngine(sample_config, rng=np.random.default_rng(42), clock=manual_clock)


@pytest.fixture
def flat_engine(sample_config, manual_clock):
    """Engine whose random walk never moves (every draw is the walk's centre)"""
    registry = InstrumentRegistry([
        Instrument("BTC-PERP", 100.0, 125, 0.5),
        Instrument("ETH-PERP", 50.0, 100, 0.01),
    ])
    return SimulationEngine(sample_config, registry=registry, rng=FixedRandom(0.49),
                            clock=manual_clock)


@pytest.fixture
def fixed_random():
    """Factory for FixedRandom sources"""
    return FixedRandom
