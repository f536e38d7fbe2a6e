"""Aggregation of per-flow statistics for the sensor-network scenario."""

from wsnsim.metrics.aggregator import AggregateMetrics, aggregate

__all__ = [
    "AggregateMetrics",
    "aggregate",
]
