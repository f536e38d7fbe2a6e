"""Node identities and static placement inside the square deployment area."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from wsnsim.config import ConfigError, SimulationConfig
from wsnsim.engine.base import NetworkEngine, Position


class NodeRole(Enum):
    SINK = "sink"
    SENSOR = "sensor"


@dataclass(frozen=True)
class NodeSpec:
    node_id: int
    role: NodeRole
    position: Position
    index: Optional[int] = None  # sensor index; None for the sink


@dataclass
class Topology:
    area_size: float
    sink: NodeSpec
    sensors: List[NodeSpec] = field(default_factory=list)

    @property
    def nodes(self) -> Iterator[NodeSpec]:
        """Sink first, then sensors in creation order."""
        yield self.sink
        yield from self.sensors


def random_rectangle_position(rng: random.Random, area_size: float) -> Position:
    return Position(rng.uniform(0.0, area_size), rng.uniform(0.0, area_size))


def build_topology(
    config: SimulationConfig,
    rng: random.Random,
    engine: NetworkEngine | None = None,
) -> Topology:
    """Create the sink and ``config.n_sensors`` sensors and place them.

    Every node first receives a uniform random position, the sink included, so
    the sequence of draws is the same whatever the sink ends up at; the sink is
    then pinned to the centre of the area. With an ``engine`` the nodes are
    created and positioned there; without one, ids are numbered from 0.
    """

    if config.area_size <= 0:
        raise ConfigError(f"area_size must be positive to place nodes, got {config.area_size!r}")

    if engine is not None:
        sink_id = engine.create_nodes(1)[0]
        sensor_ids = engine.create_nodes(config.n_sensors)
    else:
        sink_id = 0
        sensor_ids = list(range(1, config.n_sensors + 1))

    random_rectangle_position(rng, config.area_size)  # sink draw, overridden below
    centre = config.area_size / 2.0
    sink = NodeSpec(sink_id, NodeRole.SINK, Position(centre, centre))
    sensors = [
        NodeSpec(node_id, NodeRole.SENSOR, random_rectangle_position(rng, config.area_size), index=i)
        for i, node_id in enumerate(sensor_ids)
    ]
    topology = Topology(area_size=config.area_size, sink=sink, sensors=sensors)

    if engine is not None:
        for node in topology.nodes:
            engine.set_position(node.node_id, node.position)
    return topology
