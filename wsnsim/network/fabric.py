"""Shared wireless medium, MAC roles and addressing for the scenario."""

from __future__ import annotations

from dataclasses import dataclass
from ipaddress import IPv4Address
from typing import Dict

from wsnsim.config import ADDRESS_BLOCK, CONTROL_MODE, DATA_MODE, NETWORK_NAME, SimulationConfig
from wsnsim.engine.base import ChannelSettings, EngineError, MacRole, NetworkEngine
from wsnsim.topology.builder import Topology


@dataclass
class Fabric:
    topology: Topology
    channel: ChannelSettings
    network_name: str
    addresses: Dict[int, IPv4Address]
    sink_address: IPv4Address


def channel_settings(config: SimulationConfig) -> ChannelSettings:
    """Log-distance channel at a constant transmit power and a fixed rate."""
    return ChannelSettings(
        path_loss_exp=config.path_loss_exp,
        tx_power_start_dbm=config.tx_power,
        tx_power_end_dbm=config.tx_power,
        data_mode=DATA_MODE,
        control_mode=CONTROL_MODE,
    )


def build_fabric(engine: NetworkEngine, topology: Topology, config: SimulationConfig) -> Fabric:
    settings = channel_settings(config)
    engine.configure_channel(settings)

    engine.install_mac([topology.sink.node_id], MacRole.ACCESS_POINT, NETWORK_NAME)
    sensor_ids = [s.node_id for s in topology.sensors]
    # Stations wait for beacons instead of probing for the access point.
    engine.install_mac(sensor_ids, MacRole.STATION, NETWORK_NAME, active_probing=False)

    ordered = [node.node_id for node in topology.nodes]
    issued = engine.assign_addresses(ordered, ADDRESS_BLOCK)
    if len(issued) != len(ordered) or len(set(issued)) != len(issued):
        raise EngineError(f"Engine issued {len(set(issued))} distinct addresses for {len(ordered)} nodes")
    addresses = dict(zip(ordered, issued))

    return Fabric(
        topology=topology,
        channel=settings,
        network_name=NETWORK_NAME,
        addresses=addresses,
        sink_address=addresses[topology.sink.node_id],
    )
