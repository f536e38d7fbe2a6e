"""Wireless sensor-network scenario evaluation on a SimPy network engine."""

from wsnsim.config import SimulationConfig, resolve_config
from wsnsim.experiments import ScenarioResult, ScenarioRunner
from wsnsim.metrics import AggregateMetrics

__all__ = [
    "AggregateMetrics",
    "ScenarioResult",
    "ScenarioRunner",
    "SimulationConfig",
    "resolve_config",
]
