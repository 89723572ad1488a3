"""One-shot command line lookup: ``python -m aether.cli Tokyo --unit F``."""

import argparse
import sys
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional, Sequence

from aether.config import settings
from aether.display import session_view
from aether.errors import LocationValidationError
from aether.orchestrator import build_orchestrator
from aether.units import TemperatureUnit
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="aether", description="Look up weather, history and air quality.")
    parser.add_argument("location", nargs="?", default=settings.default_location)
    parser.add_argument("--unit", choices=[u.value for u in TemperatureUnit], default=TemperatureUnit.CELSIUS.value)
    parser.add_argument("--timeout", type=float, default=60.0, help="seconds to wait for every stage")
    parser.add_argument("--log-level", default=settings.log_level)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level.upper(), job_name="aether_cli")

    with build_orchestrator(settings, on_notice=lambda n: logger.warning(n.message)) as orchestrator:
        try:
            pending = orchestrator.submit(args.location)
        except LocationValidationError as exc:
            logger.error(str(exc))
            return 2
        try:
            session = pending.result(timeout=args.timeout)
        except FutureTimeoutError:
            logger.error(f"Gave up after {args.timeout}s; showing what has resolved so far")
            session = orchestrator.session
        if session is None:
            logger.error("No session was produced")
            return 1
        print(session_view(session, args.unit, loading=orchestrator.loading).model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
