import random
from ipaddress import IPv4Address

import pytest

from wsnsim.engine.base import FlowStats
from wsnsim.metrics import aggregate

SINK = IPv4Address("10.0.0.1")


def _flow(flow_id, tx, rx, delay_sum=0.0, rx_bytes=None):
    return FlowStats(
        flow_id=flow_id,
        source=SINK + flow_id,
        destination=SINK,
        tx_packets=tx,
        rx_packets=rx,
        delay_sum=delay_sum,
        rx_bytes=rx * 68 if rx_bytes is None else rx_bytes,
    )


def test_sums_and_ratios():
    stats = [_flow(1, 40, 30, 0.3), _flow(2, 40, 40, 0.1), _flow(3, 20, 10, 0.1)]
    m = aggregate(stats, duration=30.0)
    assert (m.total_tx, m.total_rx, m.flow_count) == (100, 80, 3)
    assert m.delay_sum == pytest.approx(0.5)
    assert m.total_rx_bytes == 80 * 68
    assert m.pdr == pytest.approx(80.0)
    assert m.avg_delay == pytest.approx(0.5 / 80)
    assert m.throughput_kbps == pytest.approx(80 * 68 * 8 / 30000)
    assert m.lost == 20


def test_no_flows():
    m = aggregate([], duration=30.0)
    assert (m.total_tx, m.total_rx, m.flow_count) == (0, 0, 0)
    assert m.pdr == 0.0
    assert m.avg_delay == 0.0
    assert m.throughput_kbps == 0.0


def test_no_transmissions_gives_zero_pdr():
    assert aggregate([_flow(1, 0, 0)], duration=30.0).pdr == 0.0


def test_no_receptions_gives_zero_delay():
    m = aggregate([_flow(1, 40, 0, delay_sum=0.0)], duration=30.0)
    assert m.avg_delay == 0.0
    assert m.pdr == 0.0


@pytest.mark.parametrize("duration", [0.0, -5.0])
def test_degenerate_duration_gives_zero_throughput(duration):
    m = aggregate([_flow(1, 40, 40, 0.2)], duration=duration)
    assert m.throughput_kbps == 0.0
    assert m.pdr == 100.0


def test_unexpected_flows_are_included():
    stray = FlowStats(
        flow_id=9,
        source=IPv4Address("10.0.0.9"),
        destination=IPv4Address("10.0.0.50"),
        tx_packets=5,
        rx_packets=5,
        delay_sum=0.05,
        rx_bytes=100,
    )
    m = aggregate([_flow(1, 10, 5), stray], duration=10.0)
    assert (m.total_tx, m.total_rx, m.flow_count) == (15, 10, 2)


def test_pdr_bounded_for_random_counters():
    rng = random.Random(0)
    for _ in range(200):
        stats = []
        for i in range(rng.randint(0, 40)):
            tx = rng.randint(0, 50)
            stats.append(_flow(i + 1, tx, rng.randint(0, tx)))
        assert 0.0 <= aggregate(stats, duration=30.0).pdr <= 100.0


def test_accepts_generator():
    m = aggregate((_flow(i, 10, 10) for i in range(1, 4)), duration=10.0)
    assert m.flow_count == 3
