"""Capability interface between the scenario core and a network engine.

The core never touches event scheduling, radio physics or per-packet
bookkeeping directly. It drives an engine through the narrow
:class:`NetworkEngine` contract below and reads back :class:`FlowStats`. The
bundled :class:`~wsnsim.engine.simpy_engine.SimPyEngine` implements it on top
of SimPy; tests substitute a deterministic fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from ipaddress import IPv4Address
from typing import List, Sequence


class EngineError(RuntimeError):
    """Fatal failure inside the network engine."""


class UnknownNodeError(EngineError):
    pass


class AddressExhaustedError(EngineError):
    pass


class MacRole(Enum):
    ACCESS_POINT = "ap"
    STATION = "sta"


@dataclass(frozen=True)
class Position:
    x: float
    y: float

    def distance_to(self, other: "Position") -> float:
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5


@dataclass(frozen=True)
class ChannelSettings:
    path_loss_exp: float
    tx_power_start_dbm: float
    tx_power_end_dbm: float
    data_mode: str
    control_mode: str


@dataclass(frozen=True)
class SinkEndpoint:
    node_id: int
    port: int
    start_time: float
    stop_time: float


@dataclass(frozen=True)
class TrafficFlow:
    """Periodic uplink source installed on one sensor."""

    sensor_index: int
    source_node: int
    destination: IPv4Address
    port: int
    packet_size: int
    interval: float
    max_packets: int
    start_time: float
    stop_time: float


@dataclass(frozen=True)
class FlowStats:
    """Per-flow counters reported by the engine after a run."""

    flow_id: int
    source: IPv4Address
    destination: IPv4Address
    tx_packets: int
    rx_packets: int
    delay_sum: float  # seconds, over received packets
    rx_bytes: int
    tx_bytes: int = 0
    lost_packets: int = 0


class NetworkEngine(ABC):
    """Operations a discrete-event network engine must offer the core."""

    @abstractmethod
    def create_nodes(self, count: int) -> List[int]:
        """Allocate ``count`` nodes and return their ids in creation order."""

    @abstractmethod
    def set_position(self, node_id: int, position: Position) -> None:
        pass

    @abstractmethod
    def configure_channel(self, settings: ChannelSettings) -> None:
        pass

    @abstractmethod
    def install_mac(
        self,
        node_ids: Sequence[int],
        role: MacRole,
        network_name: str,
        active_probing: bool = True,
    ) -> None:
        pass

    @abstractmethod
    def assign_addresses(self, node_ids: Sequence[int], block: str) -> List[IPv4Address]:
        """Number ``node_ids`` in order from ``block`` and return the addresses."""

    @abstractmethod
    def install_traffic_sink(self, endpoint: SinkEndpoint) -> None:
        pass

    @abstractmethod
    def install_traffic_source(self, flow: TrafficFlow) -> None:
        pass

    @abstractmethod
    def install_flow_monitor(self) -> None:
        pass

    @abstractmethod
    def run(self, stop_time: float) -> None:
        """Process every event up to ``stop_time``; blocks until done."""

    @abstractmethod
    def get_flow_stats(self) -> List[FlowStats]:
        pass
