"""Per-flow packet accounting at the IP layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from ipaddress import IPv4Address
from typing import Dict, List, NamedTuple

from wsnsim.engine.base import FlowStats

UDP_PROTOCOL = 17
UDP_HEADER_BYTES = 8
IPV4_HEADER_BYTES = 20
MAX_PER_HOP_DELAY_S = 10.0


class FiveTuple(NamedTuple):
    source: IPv4Address
    destination: IPv4Address
    protocol: int
    source_port: int
    destination_port: int


@dataclass
class Packet:
    uid: int
    flow_key: FiveTuple
    size_bytes: int  # IP packet size, headers included
    sent_at: float


@dataclass
class _FlowCounters:
    flow_id: int
    key: FiveTuple
    tx_packets: int = 0
    tx_bytes: int = 0
    rx_packets: int = 0
    rx_bytes: int = 0
    delay_sum: float = 0.0
    lost_packets: int = 0


@dataclass
class FlowMonitor:
    """Classifies packets by five-tuple and accumulates per-flow counters.

    Flow ids are handed out from 1 in first-seen order. A packet sent but not
    received is tracked as in flight until :meth:`check_for_lost_packets`
    declares it lost.
    """

    flows: Dict[FiveTuple, _FlowCounters] = field(default_factory=dict)
    in_flight: Dict[int, Packet] = field(default_factory=dict)

    def _counters(self, key: FiveTuple) -> _FlowCounters:
        counters = self.flows.get(key)
        if counters is None:
            counters = _FlowCounters(flow_id=len(self.flows) + 1, key=key)
            self.flows[key] = counters
        return counters

    def record_tx(self, packet: Packet) -> None:
        """Record a packet leaving the source's IP layer."""
        counters = self._counters(packet.flow_key)
        counters.tx_packets += 1
        counters.tx_bytes += packet.size_bytes
        self.in_flight[packet.uid] = packet

    def record_rx(self, packet: Packet, now: float) -> None:
        """Record a packet delivered to the destination's IP layer."""
        if self.in_flight.pop(packet.uid, None) is None:
            return
        counters = self._counters(packet.flow_key)
        counters.rx_packets += 1
        counters.rx_bytes += packet.size_bytes
        counters.delay_sum += now - packet.sent_at

    def check_for_lost_packets(self, now: float, max_delay_s: float = MAX_PER_HOP_DELAY_S) -> None:
        for uid, packet in list(self.in_flight.items()):
            if now - packet.sent_at > max_delay_s:
                self.flows[packet.flow_key].lost_packets += 1
                del self.in_flight[uid]

    def stats(self) -> List[FlowStats]:
        return [
            FlowStats(
                flow_id=c.flow_id,
                source=c.key.source,
                destination=c.key.destination,
                tx_packets=c.tx_packets,
                rx_packets=c.rx_packets,
                delay_sum=c.delay_sum,
                rx_bytes=c.rx_bytes,
                tx_bytes=c.tx_bytes,
                lost_packets=c.lost_packets,
            )
            for c in sorted(self.flows.values(), key=lambda c: c.flow_id)
        ]
