"""Reduction of per-flow engine counters into headline network metrics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from wsnsim.engine.base import FlowStats


@dataclass(frozen=True)
class AggregateMetrics:
    """Totals plus packet delivery ratio, mean delay and mean throughput."""

    total_tx: int
    total_rx: int
    delay_sum: float  # s
    total_rx_bytes: int
    flow_count: int
    pdr: float  # %
    avg_delay: float  # s
    throughput_kbps: float

    @property
    def lost(self) -> int:
        return self.total_tx - self.total_rx


def aggregate(flow_stats: Iterable[FlowStats], duration: float) -> AggregateMetrics:
    """Sum every observed flow and derive the three aggregate metrics.

    No flow is filtered out. Each ratio falls back to ``0`` when its
    denominator is zero (no transmissions, no receptions, or a non-positive
    duration).
    """

    total_tx = 0
    total_rx = 0
    delay_sum = 0.0
    total_rx_bytes = 0
    flow_count = 0
    for st in flow_stats:
        total_tx += st.tx_packets
        total_rx += st.rx_packets
        delay_sum += st.delay_sum
        total_rx_bytes += st.rx_bytes
        flow_count += 1

    pdr = (total_rx / total_tx) * 100.0 if total_tx > 0 else 0.0
    avg_delay = delay_sum / total_rx if total_rx > 0 else 0.0
    throughput_kbps = (total_rx_bytes * 8.0) / (duration * 1000.0) if duration > 0 else 0.0

    return AggregateMetrics(
        total_tx=total_tx,
        total_rx=total_rx,
        delay_sum=delay_sum,
        total_rx_bytes=total_rx_bytes,
        flow_count=flow_count,
        pdr=pdr,
        avg_delay=avg_delay,
        throughput_kbps=throughput_kbps,
    )
