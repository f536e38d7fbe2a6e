"""Network engine interface and the bundled SimPy implementation."""

from wsnsim.engine.base import (
    AddressExhaustedError,
    ChannelSettings,
    EngineError,
    FlowStats,
    MacRole,
    NetworkEngine,
    Position,
    SinkEndpoint,
    TrafficFlow,
    UnknownNodeError,
)
from wsnsim.engine.simpy_engine import SimPyEngine

__all__ = [
    "AddressExhaustedError",
    "ChannelSettings",
    "EngineError",
    "FlowStats",
    "MacRole",
    "NetworkEngine",
    "Position",
    "SimPyEngine",
    "SinkEndpoint",
    "TrafficFlow",
    "UnknownNodeError",
]
