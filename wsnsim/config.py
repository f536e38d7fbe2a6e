"""Configuration dataclasses and resolution for the sensor-network scenario."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

logger = logging.getLogger(__name__)

MIN_SENSORS = 20
MAX_SENSORS = 40
DEFAULT_SENSORS = 30

# Fixed protocol constants (not user configurable).
SINK_PORT = 5000
ADDRESS_BLOCK = "10.0.0.0/255.255.255.0"
NETWORK_NAME = "IOT-WIFI-NET"
DATA_MODE = "OfdmRate24Mbps"
CONTROL_MODE = "OfdmRate24Mbps"
SINK_START_S = 0.5
SOURCE_START_S = 1.0
SOURCE_STAGGER_S = 0.01
PACKET_BUDGET_MARGIN = 10

# Command-line parameter names mapped to field names.
PARAMETER_ALIASES: Dict[str, str] = {
    "nSensors": "n_sensors",
    "simTime": "sim_time",
    "txPower": "tx_power",
    "packetInterval": "packet_interval",
    "packetSize": "packet_size",
    "areaSize": "area_size",
    "pathLossExp": "path_loss_exp",
}


class ConfigError(ValueError):
    """Raised when scenario parameters cannot be turned into a configuration."""


@dataclass(frozen=True)
class SimulationConfig:
    n_sensors: int = DEFAULT_SENSORS
    sim_time: float = 30.0  # s
    tx_power: float = 16.0  # dBm
    packet_interval: float = 1.0  # s
    packet_size: int = 40  # bytes
    area_size: float = 100.0  # m, side of the square
    path_loss_exp: float = 3.0
    seed: int = 1


_FIELD_NAMES = tuple(f.name for f in fields(SimulationConfig))
_POSITIVE_FIELDS = ("sim_time", "area_size", "packet_interval", "packet_size", "path_loss_exp")


def _canonical_name(name: str) -> str:
    canonical = PARAMETER_ALIASES.get(name, name)
    if canonical not in _FIELD_NAMES:
        raise ConfigError(f"Unknown scenario parameter '{name}'")
    return canonical


def _coerce(name: str, value: Any) -> Any:
    target = SimulationConfig.__dataclass_fields__[name].type
    try:
        if target == "int":
            if isinstance(value, float) and not value.is_integer():
                raise ConfigError(f"{name} must be an integer, got {value!r}")
            return int(value)
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from exc


def resolve_config(
    raw: Mapping[str, Any] | None = None,
    *,
    strict: bool = True,
    **overrides: Any,
) -> SimulationConfig:
    """Build a canonical :class:`SimulationConfig` from raw parameter values.

    ``raw`` and ``overrides`` may use either the command-line names
    (``nSensors``) or the field names (``n_sensors``); ``None`` values are
    ignored so unset CLI flags fall back to the defaults. A sensor count outside
    ``[MIN_SENSORS, MAX_SENSORS]`` is replaced by ``DEFAULT_SENSORS`` with a
    warning. When ``strict`` is true, non-positive durations, intervals,
    sizes, areas or exponents raise :class:`ConfigError`; otherwise they are
    passed through untouched.
    """

    values: Dict[str, Any] = {}
    for source in (raw or {}, overrides):
        for name, value in source.items():
            if value is None:
                continue
            canonical = _canonical_name(name)
            values[canonical] = _coerce(canonical, value)

    config = SimulationConfig(**values)

    if not MIN_SENSORS <= config.n_sensors <= MAX_SENSORS:
        logger.warning(
            "nSensors must be between %d and %d (got %d); using %d.",
            MIN_SENSORS,
            MAX_SENSORS,
            config.n_sensors,
            DEFAULT_SENSORS,
        )
        config = replace(config, n_sensors=DEFAULT_SENSORS)

    if strict:
        for name in _POSITIVE_FIELDS:
            if getattr(config, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(config, name)!r}")

    return config


def load_overrides(path: str | Path) -> Dict[str, Any]:
    """Read parameter overrides from a YAML mapping file."""

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"{path}: malformed YAML: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping of parameters, got {type(data).__name__}")
    for name in data:
        _canonical_name(str(name))
    return data
