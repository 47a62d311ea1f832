"""
Simulation configuration and loading helpers.
"""

from dataclasses import dataclass, asdict, replace
from datetime import timedelta
from typing import Any, Dict, Optional
import os
import json

from ..core.exceptions import ConfigurationError


@dataclass(frozen=True)
class SimulationConfig:
    """Constants fixed when an engine is constructed"""
    # Clock
    tick_interval_ms: int = 600

    # Market data
    bar_duration_ms: int = 60_000
    history_depth: int = 80  # sealed bars per series; the open bar is extra
    book_depth: int = 8

    # Account and order form
    initial_balance: float = 25_000.0
    default_leverage: int = 10
    fee_rate: float = 0.0002
    average_entry: bool = False

    # Random source seed (None = nondeterministic)
    seed: Optional[int] = None

    def __post_init__(self):
        if self.tick_interval_ms < 0:
            raise ConfigurationError("tick_interval_ms cannot be negative")
        if self.bar_duration_ms <= 0:
            raise ConfigurationError("bar_duration_ms must be positive")
        if self.history_depth < 1:
            raise ConfigurationError("history_depth must be at least 1")
        if self.book_depth < 1:
            raise ConfigurationError("book_depth must be at least 1")
        if self.initial_balance <= 0:
            raise ConfigurationError("initial_balance must be positive")
        if self.default_leverage < 1:
            raise ConfigurationError("default_leverage must be at least 1")
        if self.fee_rate < 0:
            raise ConfigurationError("fee_rate cannot be negative")

    @property
    def tick_interval(self) -> float:
        """Tick period in seconds"""
        return self.tick_interval_ms / 1000

    @property
    def bar_duration(self) -> timedelta:
        return timedelta(milliseconds=self.bar_duration_ms)

    def with_overrides(self, **kwargs) -> 'SimulationConfig':
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration keys: {e}")

    @classmethod
    def from_file(cls, config_path: str) -> 'SimulationConfig':
        """Load configuration from JSON file"""
        try:
            with open(config_path, 'r') as f:
                data = json.load(f)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load simulation config from {config_path}: {e}")
        return cls.from_dict(data)

    def save_to_file(self, config_path: str):
        """Save configuration to JSON file"""
        config_dict = {
            k: v for k, v in self.to_dict().items()
            if v is not None
        }

        with open(config_path, 'w') as f:
            json.dump(config_dict, f, indent=2)

    @classmethod
    def from_env(cls) -> 'SimulationConfig':
        """Create configuration from SIM_* environment variables"""
        seed = os.getenv('SIM_SEED')
        try:
            return cls(
                tick_interval_ms=int(os.getenv('SIM_TICK_INTERVAL_MS', '600')),
                bar_duration_ms=int(os.getenv('SIM_BAR_DURATION_MS', '60000')),
                history_depth=int(os.getenv('SIM_HISTORY_DEPTH', '80')),
                book_depth=int(os.getenv('SIM_BOOK_DEPTH', '8')),
                initial_balance=float(os.getenv('SIM_INITIAL_BALANCE', '25000')),
                default_leverage=int(os.getenv('SIM_DEFAULT_LEVERAGE', '10')),
                fee_rate=float(os.getenv('SIM_FEE_RATE', '0.0002')),
                average_entry=os.getenv('SIM_AVERAGE_ENTRY', 'false').lower() == 'true',
                seed=int(seed) if seed else None,
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid SIM_* environment value: {e}")


DEFAULT_CONFIG = SimulationConfig()

# Fast ticks and short bars for demos and tests
FAST_CONFIG = SimulationConfig(
    tick_interval_ms=50,
    bar_duration_ms=1_000,
)
