"""Log-distance propagation and SNR-based frame error model."""

from __future__ import annotations

import math
from dataclasses import dataclass

from wsnsim.engine.base import Position
from wsnsim.phy_profiles import PHYProfile

SPEED_OF_LIGHT_M_S = 299792458.0
BOLTZMANN_DBM_PER_HZ = -174.0  # thermal noise density at 290 K


@dataclass(frozen=True)
class LogDistancePropagation:
    """``L(d) = L0 + 10 * n * log10(d / d0)`` for ``d > d0``.

    Distances at or below the reference distance see the reference loss.
    """

    exponent: float
    reference_distance_m: float = 1.0
    reference_loss_db: float = 46.6777  # free-space loss at 1 m, 5.15 GHz

    def loss_db(self, distance_m: float) -> float:
        if distance_m <= self.reference_distance_m:
            return self.reference_loss_db
        return self.reference_loss_db + 10.0 * self.exponent * math.log10(
            distance_m / self.reference_distance_m
        )

    def rx_power_dbm(self, tx_power_dbm: float, a: Position, b: Position) -> float:
        return tx_power_dbm - self.loss_db(a.distance_to(b))


def propagation_delay_s(a: Position, b: Position) -> float:
    return a.distance_to(b) / SPEED_OF_LIGHT_M_S


@dataclass(frozen=True)
class FrameErrorModel:
    """Maps received power to a decoding probability for a PHY profile."""

    noise_figure_db: float = 7.0
    slope_db: float = 1.0  # width of the logistic transition around the threshold

    def noise_dbm(self, profile: PHYProfile) -> float:
        bandwidth_hz = profile.channel_width_mhz * 1e6
        return BOLTZMANN_DBM_PER_HZ + 10.0 * math.log10(bandwidth_hz) + self.noise_figure_db

    def snr_db(self, rx_power_dbm: float, profile: PHYProfile) -> float:
        return rx_power_dbm - self.noise_dbm(profile)

    def success_probability(self, rx_power_dbm: float, profile: PHYProfile) -> float:
        margin = self.snr_db(rx_power_dbm, profile) - profile.required_snr_db
        # Clamp the exponent so deep fades do not overflow.
        z = max(-60.0, min(60.0, margin / self.slope_db))
        return 1.0 / (1.0 + math.exp(-z))
