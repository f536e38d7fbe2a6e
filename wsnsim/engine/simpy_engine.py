"""Discrete-event network engine built on SimPy."""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass
from ipaddress import IPv4Address
from typing import Dict, List, Optional, Sequence

import simpy

from wsnsim.engine.addressing import Ipv4AddressAllocator
from wsnsim.engine.base import (
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
from wsnsim.engine.channel import LogDistancePropagation
from wsnsim.engine.flow_monitor import (
    IPV4_HEADER_BYTES,
    UDP_HEADER_BYTES,
    UDP_PROTOCOL,
    FiveTuple,
    FlowMonitor,
    Packet,
)
from wsnsim.engine.mac import DcfScheduler, LinkModel, WifiDevice, WifiMac
from wsnsim.phy_profiles import PHY_PROFILES, PHYProfile

logger = logging.getLogger(__name__)

EPHEMERAL_PORT_START = 49153


@dataclass
class _Node:
    node_id: int
    position: Position = Position(0.0, 0.0)
    device: Optional[WifiDevice] = None
    address: Optional[IPv4Address] = None


@dataclass
class UdpServer:
    endpoint: SinkEndpoint
    received: int = 0

    def accepts(self, now: float) -> bool:
        return self.endpoint.start_time <= now < self.endpoint.stop_time


class SimPyEngine(NetworkEngine):
    """Single-BSS Wi-Fi network with UDP applications and a flow monitor.

    Every stochastic decision (beacon phase, backoff, frame errors) draws from
    one seeded RNG, so the same seed reproduces a run exactly.
    """

    def __init__(self, seed: int = 1) -> None:
        self.env = simpy.Environment()
        self.rng = random.Random(seed)
        self.nodes: Dict[int, _Node] = {}
        self.channel: Optional[ChannelSettings] = None
        self.mac: Optional[WifiMac] = None
        self.flow_monitor: Optional[FlowMonitor] = None
        self.servers: Dict[tuple, UdpServer] = {}
        self.sources: List[TrafficFlow] = []
        self._allocators: Dict[str, Ipv4AddressAllocator] = {}
        self._uids = itertools.count(1)
        self._ran = False

    # ------------------------------------------------------------------
    # topology
    def _node(self, node_id: int) -> _Node:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise UnknownNodeError(f"No node with id {node_id}") from None

    def create_nodes(self, count: int) -> List[int]:
        if count < 0:
            raise ValueError("count must be non-negative")
        start = len(self.nodes)
        ids = list(range(start, start + count))
        for node_id in ids:
            self.nodes[node_id] = _Node(node_id)
        return ids

    def set_position(self, node_id: int, position: Position) -> None:
        node = self._node(node_id)
        node.position = position
        if node.device is not None:
            node.device.position = position

    # ------------------------------------------------------------------
    # wireless fabric
    @staticmethod
    def _profile(mode: str) -> PHYProfile:
        try:
            return PHY_PROFILES[mode]
        except KeyError:
            raise EngineError(f"Unsupported Wi-Fi mode '{mode}'") from None

    def configure_channel(self, settings: ChannelSettings) -> None:
        link = LinkModel(propagation=LogDistancePropagation(exponent=settings.path_loss_exp))
        dcf = DcfScheduler(
            self.env,
            self.rng,
            link,
            data_profile=self._profile(settings.data_mode),
            control_profile=self._profile(settings.control_mode),
        )
        self.channel = settings
        self.mac = WifiMac(self.env, self.rng, dcf, on_receive=self._ip_receive)

    def install_mac(
        self,
        node_ids: Sequence[int],
        role: MacRole,
        network_name: str,
        active_probing: bool = True,
    ) -> None:
        if self.mac is None or self.channel is None:
            raise EngineError("configure_channel must be called before install_mac")
        for node_id in node_ids:
            node = self._node(node_id)
            if node.device is not None:
                raise EngineError(f"Node {node_id} already has a Wi-Fi device")
            # Start and end power are equal for a constant-power PHY.
            node.device = WifiDevice(
                node_id=node_id,
                role=role,
                network_name=network_name,
                position=node.position,
                active_probing=active_probing,
                tx_power_dbm=self.channel.tx_power_start_dbm,
            )
            self.mac.add_device(node.device)

    def assign_addresses(self, node_ids: Sequence[int], block: str) -> List[IPv4Address]:
        allocator = self._allocators.get(block)
        if allocator is None:
            allocator = self._allocators[block] = Ipv4AddressAllocator(block)
        addresses = []
        for node_id in node_ids:
            node = self._node(node_id)
            if node.device is None:
                raise EngineError(f"Node {node_id} has no network device to address")
            node.address = allocator.allocate()
            addresses.append(node.address)
        return addresses

    # ------------------------------------------------------------------
    # applications
    def install_traffic_sink(self, endpoint: SinkEndpoint) -> None:
        node = self._node(endpoint.node_id)
        if node.address is None:
            raise EngineError(f"Sink node {endpoint.node_id} has no address")
        self.servers[(endpoint.node_id, endpoint.port)] = UdpServer(endpoint)

    def install_traffic_source(self, flow: TrafficFlow) -> None:
        node = self._node(flow.source_node)
        if node.address is None:
            raise EngineError(f"Source node {flow.source_node} has no address")
        self.sources.append(flow)
        self.env.process(self._udp_client(flow, node))

    def install_flow_monitor(self) -> None:
        self.flow_monitor = FlowMonitor()

    def _udp_client(self, flow: TrafficFlow, node: _Node):
        yield self.env.timeout(flow.start_time)
        key = FiveTuple(node.address, flow.destination, UDP_PROTOCOL, EPHEMERAL_PORT_START, flow.port)
        sent = 0
        while sent < flow.max_packets and self.env.now < flow.stop_time:
            packet = Packet(
                uid=next(self._uids),
                flow_key=key,
                size_bytes=flow.packet_size + UDP_HEADER_BYTES + IPV4_HEADER_BYTES,
                sent_at=self.env.now,
            )
            if self.flow_monitor is not None:
                self.flow_monitor.record_tx(packet)
            self.mac.enqueue(node.node_id, packet)
            sent += 1
            yield self.env.timeout(flow.interval)

    def _ip_receive(self, node_id: int, packet: Packet) -> None:
        node = self.nodes[node_id]
        if packet.flow_key.destination != node.address:
            return
        if self.flow_monitor is not None:
            self.flow_monitor.record_rx(packet, self.env.now)
        server = self.servers.get((node_id, packet.flow_key.destination_port))
        if server is not None and server.accepts(self.env.now):
            server.received += 1

    def received_by_sink(self, node_id: int, port: int) -> int:
        server = self.servers.get((node_id, port))
        return server.received if server is not None else 0

    # ------------------------------------------------------------------
    # run + results
    def run(self, stop_time: float) -> None:
        if self._ran:
            raise EngineError("Engine has already been run")
        if self.mac is None:
            raise EngineError("No wireless channel configured")
        self._ran = True
        self.mac.start()
        if stop_time > self.env.now:
            self.env.run(until=stop_time)
        if self.flow_monitor is not None:
            self.flow_monitor.check_for_lost_packets(self.env.now)
        unassociated = [d.node_id for d in self.mac.stations if d.associated_ap is None]
        if unassociated:
            logger.info("%d station(s) never associated: %s", len(unassociated), unassociated)
        for device in self.mac.stations:
            if device.dropped:
                logger.info(
                    "Station %d dropped %d frame(s): %d queue overflow, %d unassociated, %d retry limit",
                    device.node_id,
                    device.dropped,
                    device.queue_drops,
                    device.unassociated_drops,
                    device.retry_drops,
                )

    def get_flow_stats(self) -> List[FlowStats]:
        if self.flow_monitor is None:
            raise EngineError("Flow monitor not installed")
        return self.flow_monitor.stats()
