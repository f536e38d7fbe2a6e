"""Command-line entry point: resolve parameters, run the scenario, print results."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from wsnsim.config import ConfigError, load_overrides, resolve_config
from wsnsim.engine.base import EngineError
from wsnsim.experiments.runner import ScenarioRunner
from wsnsim.report import format_summary

logger = logging.getLogger("wsnsim")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wsnsim",
        description="Evaluate PDR, delay and throughput of a Wi-Fi sensor network with one sink.",
    )
    # Defaults stay None so YAML overrides are not masked by argparse defaults.
    parser.add_argument("--nSensors", type=int, help="Number of sensor nodes, 20-40 (default 30)")
    parser.add_argument("--simTime", type=float, help="Simulation time in seconds (default 30)")
    parser.add_argument("--txPower", type=float, help="Transmit power in dBm (default 16)")
    parser.add_argument("--packetInterval", type=float, help="Packet generation interval in seconds (default 1)")
    parser.add_argument("--packetSize", type=int, help="Packet size in bytes (default 40)")
    parser.add_argument("--areaSize", type=float, help="Side of the square area in metres (default 100)")
    parser.add_argument("--pathLossExp", type=float, help="Log-distance path loss exponent (default 3)")
    parser.add_argument("--seed", type=int, help="Random seed for placement and the engine (default 1)")
    parser.add_argument("--config", metavar="FILE", help="YAML file with parameter overrides")
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Accept non-positive durations, sizes and intervals instead of rejecting them",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default WARNING)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="[%(levelname)s] %(name)s: %(message)s")

    cli_values: Dict[str, Any] = {
        "nSensors": args.nSensors,
        "simTime": args.simTime,
        "txPower": args.txPower,
        "packetInterval": args.packetInterval,
        "packetSize": args.packetSize,
        "areaSize": args.areaSize,
        "pathLossExp": args.pathLossExp,
        "seed": args.seed,
    }
    try:
        file_values = load_overrides(args.config) if args.config else {}
        config = resolve_config(file_values, strict=not args.lenient, **cli_values)
    except (ConfigError, OSError) as exc:
        parser.error(str(exc))

    try:
        result = ScenarioRunner(config).run()
    except ConfigError as exc:
        parser.error(str(exc))
    except EngineError as exc:
        logger.error("Simulation failed: %s", exc)
        return 1

    print(format_summary(config, result.metrics))
    return 0


if __name__ == "__main__":
    sys.exit(main())
