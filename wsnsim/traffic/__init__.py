"""Traffic generation for the uplink sensor flows."""

from wsnsim.traffic.scheduler import packet_budget, schedule_traffic, source_start_time

__all__ = ["packet_budget", "schedule_traffic", "source_start_time"]
