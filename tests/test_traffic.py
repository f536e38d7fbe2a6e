import pytest

from wsnsim.config import ConfigError, SimulationConfig
from wsnsim.network import build_fabric
from wsnsim.topology import build_topology
from wsnsim.traffic import packet_budget, schedule_traffic, source_start_time


@pytest.mark.parametrize(
    "duration,interval,expected",
    [(30, 1, 40), (30, 3, 20), (30, 0.5, 70), (30, 30, 11), (30, 45, 10), (10, 0.3, 43)],
)
def test_packet_budget(duration, interval, expected):
    assert packet_budget(duration, interval) == expected


@pytest.mark.parametrize("interval", [0, -1.0])
def test_packet_budget_needs_positive_interval(interval):
    with pytest.raises(ConfigError):
        packet_budget(30, interval)


def test_start_times_staggered():
    starts = [source_start_time(i) for i in range(40)]
    assert starts == [1.0 + i * 0.01 for i in range(40)]
    assert all(a < b for a, b in zip(starts, starts[1:]))


def test_schedule_traffic_installs_sink_and_sources(fake_engine, rng):
    config = SimulationConfig(n_sensors=30, sim_time=30.0, packet_interval=1.0, packet_size=40)
    topology = build_topology(config, rng, fake_engine)
    fabric = build_fabric(fake_engine, topology, config)
    sink, flows = schedule_traffic(fake_engine, fabric, config)

    assert fake_engine.sinks == [sink]
    assert sink.node_id == topology.sink.node_id
    assert (sink.port, sink.start_time, sink.stop_time) == (5000, 0.5, 30.0)

    assert fake_engine.sources == flows
    assert len(flows) == 30
    for i, flow in enumerate(flows):
        assert flow.sensor_index == i
        assert flow.source_node == topology.sensors[i].node_id
        assert flow.destination == fabric.sink_address
        assert flow.port == 5000
        assert flow.packet_size == 40
        assert flow.interval == 1.0
        assert flow.max_packets == 40
        assert flow.start_time == 1.0 + i * 0.01
        assert flow.stop_time == 30.0
    assert sum(f.max_packets for f in flows) == 1200
