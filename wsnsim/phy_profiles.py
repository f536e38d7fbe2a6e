"""OFDM rate profiles for the 802.11a-style Wi-Fi PHY used by the engine.

Each profile gives the parameters the simplified PHY needs to turn a frame
size into an airtime and a received SNR into a decoding probability. The
values follow the 802.11a OFDM tables (20 MHz channel, 9 us slots).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PHYProfile:
    """Container describing one fixed-rate OFDM transmission mode."""

    name: str
    data_rate_mbps: float
    bits_per_symbol: int  # data bits carried per 4 us OFDM symbol
    required_snr_db: float
    channel_width_mhz: float = 20.0
    preamble_us: float = 20.0  # PLCP preamble + SIGNAL field
    symbol_us: float = 4.0
    notes: str = ""

    def frame_duration_s(self, size_bytes: int) -> float:
        """Airtime of a PPDU carrying ``size_bytes`` of MAC payload."""

        # SERVICE (16 bits) + payload + tail (6 bits), rounded up to symbols.
        bits = 16 + size_bytes * 8 + 6
        symbols = -(-bits // self.bits_per_symbol)
        return (self.preamble_us + symbols * self.symbol_us) * 1e-6


OFDM_6 = PHYProfile(
    name="OfdmRate6Mbps",
    data_rate_mbps=6.0,
    bits_per_symbol=24,
    required_snr_db=2.0,
    notes="BPSK 1/2; lowest mandatory rate.",
)

OFDM_12 = PHYProfile(
    name="OfdmRate12Mbps",
    data_rate_mbps=12.0,
    bits_per_symbol=48,
    required_snr_db=5.0,
    notes="QPSK 1/2.",
)

OFDM_24 = PHYProfile(
    name="OfdmRate24Mbps",
    data_rate_mbps=24.0,
    bits_per_symbol=96,
    required_snr_db=11.0,
    notes="16-QAM 1/2; the fixed rate used for data and control frames.",
)

OFDM_54 = PHYProfile(
    name="OfdmRate54Mbps",
    data_rate_mbps=54.0,
    bits_per_symbol=216,
    required_snr_db=24.0,
    notes="64-QAM 3/4.",
)


PHY_PROFILES = {
    profile.name: profile
    for profile in (OFDM_6, OFDM_12, OFDM_24, OFDM_54)
}
