"""Simplified infrastructure-mode 802.11 MAC: association and DCF access."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

import simpy

from wsnsim.engine.base import MacRole, Position
from wsnsim.engine.channel import FrameErrorModel, LogDistancePropagation, propagation_delay_s
from wsnsim.phy_profiles import PHYProfile

SLOT_S = 9e-6
SIFS_S = 16e-6
DIFS_S = SIFS_S + 2 * SLOT_S
CW_MIN = 15
CW_MAX = 1023
RETRY_LIMIT = 7
BEACON_INTERVAL_S = 0.1024
PROBE_TIMEOUT_S = 0.05
MAC_QUEUE_CAPACITY = 500

DATA_OVERHEAD_BYTES = 36  # MAC header + FCS + LLC/SNAP
ACK_BYTES = 14


@dataclass
class WifiDevice:
    """Per-node MAC state and drop counters."""

    node_id: int
    role: MacRole
    network_name: str
    position: Position
    active_probing: bool = True
    tx_power_dbm: float = 16.0
    associated_ap: Optional[int] = None
    queue: Optional[simpy.Store] = None
    queue_drops: int = 0
    unassociated_drops: int = 0
    retry_drops: int = 0

    @property
    def is_ap(self) -> bool:
        return self.role is MacRole.ACCESS_POINT

    @property
    def dropped(self) -> int:
        return self.queue_drops + self.unassociated_drops + self.retry_drops


@dataclass
class LinkModel:
    propagation: LogDistancePropagation
    error_model: FrameErrorModel = field(default_factory=FrameErrorModel)

    def success_probability(self, sender: WifiDevice, receiver: WifiDevice, profile: PHYProfile) -> float:
        rx_dbm = self.propagation.rx_power_dbm(sender.tx_power_dbm, sender.position, receiver.position)
        return self.error_model.success_probability(rx_dbm, profile)


class DcfScheduler:
    """Contention-based channel access over one shared medium.

    The medium is a capacity-one ``simpy.Resource``: a frame exchange
    (DATA + SIFS + ACK) holds it exclusively, so contention shows up as
    queueing delay rather than explicit collisions.
    """

    def __init__(
        self,
        env: simpy.Environment,
        rng: random.Random,
        link: LinkModel,
        data_profile: PHYProfile,
        control_profile: PHYProfile,
    ) -> None:
        self.env = env
        self.rng = rng
        self.link = link
        self.data_profile = data_profile
        self.control_profile = control_profile
        self.medium = simpy.Resource(env, capacity=1)

    def exchange_duration_s(self, payload_bytes: int) -> float:
        data = self.data_profile.frame_duration_s(payload_bytes + DATA_OVERHEAD_BYTES)
        ack = self.control_profile.frame_duration_s(ACK_BYTES)
        return data + SIFS_S + ack

    def tx(self, sender: WifiDevice, receiver: WifiDevice, payload_bytes: int):
        """SimPy process sending one unicast frame; its value is True once acknowledged."""

        cw = CW_MIN
        p_data = self.link.success_probability(sender, receiver, self.data_profile)
        p_ack = self.link.success_probability(receiver, sender, self.control_profile)
        for _ in range(RETRY_LIMIT):
            yield self.env.timeout(DIFS_S + self.rng.randint(0, cw) * SLOT_S)
            with self.medium.request() as req:
                yield req
                yield self.env.timeout(self.exchange_duration_s(payload_bytes))
            if self.rng.random() < p_data and self.rng.random() < p_ack:
                return True
            cw = min(2 * (cw + 1) - 1, CW_MAX)
        return False


class WifiMac:
    """Owns the devices of one BSS and moves frames from stations to the AP."""

    def __init__(
        self,
        env: simpy.Environment,
        rng: random.Random,
        dcf: DcfScheduler,
        on_receive: Callable[[int, object], None],
    ) -> None:
        self.env = env
        self.rng = rng
        self.dcf = dcf
        self.on_receive = on_receive
        self.devices: Dict[int, WifiDevice] = {}

    def add_device(self, device: WifiDevice) -> None:
        device.queue = simpy.Store(self.env)
        self.devices[device.node_id] = device

    @property
    def stations(self):
        return [d for d in self.devices.values() if not d.is_ap]

    def start(self) -> None:
        """Start beaconing, scanning and transmit loops for every device."""

        for device in self.devices.values():
            if device.is_ap:
                self.env.process(self._beacon_loop(device, self.rng.uniform(0, BEACON_INTERVAL_S)))
                continue
            if device.active_probing:
                self.env.process(self._probe(device))
            self.env.process(self._tx_loop(device))

    def enqueue(self, node_id: int, packet) -> bool:
        device = self.devices[node_id]
        if len(device.queue.items) >= MAC_QUEUE_CAPACITY:
            device.queue_drops += 1
            return False
        device.queue.put(packet)
        return True

    def _candidates(self, station: WifiDevice):
        return [
            d for d in self.devices.values()
            if d.is_ap and d.network_name == station.network_name
        ]

    def _beacon_loop(self, ap: WifiDevice, phase: float):
        yield self.env.timeout(phase)
        while True:
            self._beacon(ap)
            yield self.env.timeout(BEACON_INTERVAL_S)

    def _beacon(self, ap: WifiDevice) -> None:
        profile = self.dcf.control_profile
        for station in self.stations:
            if station.associated_ap is not None or station.network_name != ap.network_name:
                continue
            if self.rng.random() < self.dcf.link.success_probability(ap, station, profile):
                station.associated_ap = ap.node_id

    def _probe(self, station: WifiDevice):
        profile = self.dcf.control_profile
        while station.associated_ap is None:
            for ap in self._candidates(station):
                request_ok = self.rng.random() < self.dcf.link.success_probability(station, ap, profile)
                response_ok = self.rng.random() < self.dcf.link.success_probability(ap, station, profile)
                if request_ok and response_ok:
                    station.associated_ap = ap.node_id
                    break
            yield self.env.timeout(PROBE_TIMEOUT_S)

    def _tx_loop(self, station: WifiDevice):
        while True:
            packet = yield station.queue.get()
            if station.associated_ap is None:
                station.unassociated_drops += 1
                continue
            ap = self.devices[station.associated_ap]
            delivered = yield self.env.process(self.dcf.tx(station, ap, packet.size_bytes))
            if not delivered:
                station.retry_drops += 1
                continue
            self.env.process(self._propagate(station, ap, packet))

    def _propagate(self, sender: WifiDevice, receiver: WifiDevice, packet):
        yield self.env.timeout(propagation_delay_s(sender.position, receiver.position))
        self.on_receive(receiver.node_id, packet)
