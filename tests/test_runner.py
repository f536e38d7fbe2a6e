import pytest

from conftest import FakeEngine
from wsnsim.config import SimulationConfig, resolve_config
from wsnsim.engine.base import EngineError
from wsnsim.experiments import ScenarioRunner, run_simulation


def test_end_to_end_with_fake_engine():
    engine = FakeEngine(delivery=1.0)
    config = resolve_config(nSensors=30, simTime=30, packetInterval=1, packetSize=40)
    result = ScenarioRunner(config, engine_factory=lambda cfg: engine).run()

    assert len(result.flows) == 30
    assert all(s.tx_packets == 40 for s in result.flow_stats)
    assert result.metrics.total_tx == 1200
    assert result.metrics.total_rx == 1200
    assert result.metrics.pdr == pytest.approx(100.0)
    assert result.metrics.avg_delay == pytest.approx(0.002)
    assert result.metrics.throughput_kbps == pytest.approx(1200 * 68 * 8 / 30000)
    assert engine.stop_time == 30.0


def test_stages_run_in_order():
    engine = FakeEngine()
    ScenarioRunner(SimulationConfig(), engine_factory=lambda cfg: engine).run()
    order = [c for c in engine.calls if c != "install_mac"]
    assert order == [
        "create_nodes",
        "create_nodes",
        "configure_channel",
        "assign_addresses",
        "install_traffic_sink",
        "install_flow_monitor",
        "run",
    ]


def test_partial_delivery():
    engine = FakeEngine(delivery=0.5)
    result = ScenarioRunner(SimulationConfig(n_sensors=20), engine_factory=lambda cfg: engine).run()
    assert result.metrics.total_tx == 20 * 40
    assert result.metrics.total_rx == 20 * 20
    assert result.metrics.pdr == pytest.approx(50.0)


def test_runner_is_single_use():
    runner = ScenarioRunner(SimulationConfig(), engine_factory=lambda cfg: FakeEngine())
    runner.run()
    with pytest.raises(RuntimeError):
        runner.run()


class _BrokenEngine(FakeEngine):
    def run(self, stop_time):
        raise EngineError("cannot allocate event queue")


def test_engine_failure_is_fatal():
    runner = ScenarioRunner(SimulationConfig(), engine_factory=lambda cfg: _BrokenEngine())
    with pytest.raises(EngineError):
        runner.run()
    assert runner.result is None


def test_run_simulation_installs_monitor_then_runs():
    engine = FakeEngine()
    assert run_simulation(engine, 12.0) == []
    assert engine.monitored
    assert engine.calls == ["install_flow_monitor", "run"]
    assert engine.stop_time == 12.0
