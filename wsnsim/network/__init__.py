"""Wireless fabric wiring: channel, MAC roles and addressing."""

from wsnsim.network.fabric import Fabric, build_fabric, channel_settings

__all__ = ["Fabric", "build_fabric", "channel_settings"]
