"""Simulation engine, order estimates and snapshots."""

from .engine import SimulationEngine
from .orders import OrderEstimator
from .snapshot import Snapshot, SnapshotProjector

__all__ = ['SimulationEngine', 'OrderEstimator', 'Snapshot', 'SnapshotProjector']
