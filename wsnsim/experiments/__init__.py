"""Scenario execution."""

from wsnsim.experiments.runner import ScenarioResult, ScenarioRunner, run_simulation

__all__ = ["ScenarioResult", "ScenarioRunner", "run_simulation"]
