"""Simulation configuration."""

from .simulation_config import SimulationConfig, DEFAULT_CONFIG, FAST_CONFIG

__all__ = ['SimulationConfig', 'DEFAULT_CONFIG', 'FAST_CONFIG']
