from __future__ import annotations

import random
from ipaddress import IPv4Address
from typing import Dict, List, Sequence

import pytest

from wsnsim.config import SimulationConfig
from wsnsim.engine.addressing import Ipv4AddressAllocator
from wsnsim.engine.base import (
    ChannelSettings,
    FlowStats,
    MacRole,
    NetworkEngine,
    Position,
    SinkEndpoint,
    TrafficFlow,
)


class FakeEngine(NetworkEngine):
    """Records every call and reports canned per-flow counters.

    Each source is assumed to spend its whole packet budget; ``delivery`` is
    the fraction of those packets reported as received.
    """

    def __init__(self, delivery: float = 1.0, delay_s: float = 0.002) -> None:
        self.delivery = delivery
        self.delay_s = delay_s
        self.calls: List[str] = []
        self.positions: Dict[int, Position] = {}
        self.channel: ChannelSettings | None = None
        self.macs: Dict[int, tuple] = {}
        self.addresses: Dict[int, IPv4Address] = {}
        self.sinks: List[SinkEndpoint] = []
        self.sources: List[TrafficFlow] = []
        self.stop_time: float | None = None
        self.monitored = False
        self._next_id = 0

    def create_nodes(self, count: int) -> List[int]:
        self.calls.append("create_nodes")
        ids = list(range(self._next_id, self._next_id + count))
        self._next_id += count
        return ids

    def set_position(self, node_id: int, position: Position) -> None:
        self.positions[node_id] = position

    def configure_channel(self, settings: ChannelSettings) -> None:
        self.calls.append("configure_channel")
        self.channel = settings

    def install_mac(self, node_ids: Sequence[int], role: MacRole, network_name: str, active_probing: bool = True) -> None:
        self.calls.append("install_mac")
        for node_id in node_ids:
            self.macs[node_id] = (role, network_name, active_probing)

    def assign_addresses(self, node_ids: Sequence[int], block: str) -> List[IPv4Address]:
        self.calls.append("assign_addresses")
        allocator = Ipv4AddressAllocator(block)
        issued = allocator.allocate_many(len(node_ids))
        self.addresses.update(zip(node_ids, issued))
        return issued

    def install_traffic_sink(self, endpoint: SinkEndpoint) -> None:
        self.calls.append("install_traffic_sink")
        self.sinks.append(endpoint)

    def install_traffic_source(self, flow: TrafficFlow) -> None:
        self.sources.append(flow)

    def install_flow_monitor(self) -> None:
        self.calls.append("install_flow_monitor")
        self.monitored = True

    def run(self, stop_time: float) -> None:
        self.calls.append("run")
        self.stop_time = stop_time

    def get_flow_stats(self) -> List[FlowStats]:
        stats = []
        for flow_id, flow in enumerate(self.sources, start=1):
            rx = int(flow.max_packets * self.delivery)
            stats.append(
                FlowStats(
                    flow_id=flow_id,
                    source=self.addresses[flow.source_node],
                    destination=flow.destination,
                    tx_packets=flow.max_packets,
                    rx_packets=rx,
                    delay_sum=rx * self.delay_s,
                    rx_bytes=rx * (flow.packet_size + 28),
                    tx_bytes=flow.max_packets * (flow.packet_size + 28),
                    lost_packets=flow.max_packets - rx,
                )
            )
        return stats


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def default_config() -> SimulationConfig:
    return SimulationConfig()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)
