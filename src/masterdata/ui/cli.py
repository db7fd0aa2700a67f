from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from masterdata.app import (
    UnsupportedInputError,
    enrich_sites,
    find_turbine,
    import_registry_file,
    registry_statistics,
)
from masterdata.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Not an integer: {value}") from exc
    if parsed < 1:
        raise argparse.ArgumentTypeError(f"Must be positive: {value}")
    return parsed


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Wind turbine master data")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_cmd = subparsers.add_parser("import", help="Import a registry workbook (.xlsx)")
    import_cmd.add_argument("file", type=Path, help="Path to the .xlsx file")
    import_cmd.add_argument(
        "--enrich",
        action="store_true",
        help="Resolve sites for unlinked turbines after the import",
    )

    enrich = subparsers.add_parser("enrich-sites", help="Resolve turbine sites via DAWA and OIS")
    enrich.add_argument(
        "--limit",
        type=_positive_int,
        help="Maximum number of turbines to resolve",
    )
    enrich.add_argument(
        "--all",
        action="store_true",
        help="Re-resolve turbines that already have a site",
    )

    subparsers.add_parser("stats", help="Print turbine and site statistics")

    turbine = subparsers.add_parser("turbine", help="Print one turbine by GSRN")
    turbine.add_argument("gsrn", type=str, help="Turbine GSRN")

    return parser.parse_args(list(argv))


def _print_json(payload: object) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, ensure_ascii=False) + "\n")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "import":
            result = import_registry_file(parsed_args.file)
            _print_json(result.as_dict())
            if parsed_args.enrich:
                summary = enrich_sites()
                _print_json(summary.as_dict())
        elif parsed_args.command == "enrich-sites":
            summary = enrich_sites(only_unlinked=not parsed_args.all, limit=parsed_args.limit)
            _print_json(summary.as_dict())
        elif parsed_args.command == "stats":
            _print_json(registry_statistics().as_dict())
        elif parsed_args.command == "turbine":
            payload = find_turbine(parsed_args.gsrn)
            if payload is None:
                raise UnsupportedInputError(f"No turbine with GSRN {parsed_args.gsrn}")  # noqa: TRY301
            _print_json(payload)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (UnsupportedInputError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
