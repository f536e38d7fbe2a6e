"""Periodic uplink traffic: one UDP sink on the gateway, one source per sensor."""

from __future__ import annotations

import math
from typing import List, Tuple

from wsnsim.config import (
    PACKET_BUDGET_MARGIN,
    SINK_PORT,
    SINK_START_S,
    SOURCE_START_S,
    SOURCE_STAGGER_S,
    ConfigError,
    SimulationConfig,
)
from wsnsim.engine.base import NetworkEngine, SinkEndpoint, TrafficFlow
from wsnsim.network.fabric import Fabric


def packet_budget(duration: float, interval: float) -> int:
    """Maximum packets a source may send: ``floor(duration / interval) + 10``.

    The margin keeps the budget non-zero when the interval is close to the
    duration.
    """
    if interval <= 0:
        raise ConfigError(f"packet interval must be positive, got {interval!r}")
    return math.floor(duration / interval) + PACKET_BUDGET_MARGIN


def source_start_time(index: int) -> float:
    """Staggered start so sensors do not all fire in the same instant."""
    return SOURCE_START_S + index * SOURCE_STAGGER_S


def schedule_traffic(
    engine: NetworkEngine,
    fabric: Fabric,
    config: SimulationConfig,
    port: int = SINK_PORT,
) -> Tuple[SinkEndpoint, List[TrafficFlow]]:
    sink = SinkEndpoint(
        node_id=fabric.topology.sink.node_id,
        port=port,
        start_time=SINK_START_S,
        stop_time=config.sim_time,
    )
    engine.install_traffic_sink(sink)

    budget = packet_budget(config.sim_time, config.packet_interval)
    flows = []
    for sensor in fabric.topology.sensors:
        flow = TrafficFlow(
            sensor_index=sensor.index,
            source_node=sensor.node_id,
            destination=fabric.sink_address,
            port=port,
            packet_size=config.packet_size,
            interval=config.packet_interval,
            max_packets=budget,
            start_time=source_start_time(sensor.index),
            stop_time=config.sim_time,
        )
        engine.install_traffic_source(flow)
        flows.append(flow)
    return sink, flows
