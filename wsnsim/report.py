"""Human-readable summary of a finished run."""

from __future__ import annotations

from typing import List

from wsnsim.config import SimulationConfig
from wsnsim.metrics.aggregator import AggregateMetrics

RULE_WIDTH = 32


def format_summary(config: SimulationConfig, metrics: AggregateMetrics) -> str:
    rows = [
        ("Sensors", f"{config.n_sensors}"),
        ("Simulation time", f"{config.sim_time:g} s"),
        ("TxPower", f"{config.tx_power:g} dBm"),
        ("Packet interval", f"{config.packet_interval:g} s"),
        ("Packet size", f"{config.packet_size} bytes"),
        ("Packets transmitted", f"{metrics.total_tx}"),
        ("Packets received", f"{metrics.total_rx}"),
        ("PDR", f"{metrics.pdr:.2f} %"),
        ("Average delay", f"{metrics.avg_delay:.6f} s"),
        ("Average throughput", f"{metrics.throughput_kbps:.3f} kbps"),
    ]
    label_width = max(len(label) for label, _ in rows) + 2
    lines: List[str] = [" RESULTS ".center(RULE_WIDTH, "=")]
    lines.extend(f"{label + ':':<{label_width}}{value}" for label, value in rows)
    lines.append("=" * RULE_WIDTH)
    return "\n".join(lines)
