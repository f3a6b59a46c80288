# logroll/cli/main.py
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

from ..cli_utils import HELP_EPILOG, DeterministicHelpFormatter
from ..config import Settings, load_settings, validate_settings
from ..errors import CLIError, LogrollError, format_error
from ..rotator import rotate
from ._exit import INTERNAL_ERR, OK, exit_code_for
from ._io import configure_logging, eprint, notice, print_json, set_verbosity

_logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logroll",
        description="Rename a log file to TARGET and recreate SOURCE holding a rollover marker.",
        epilog=HELP_EPILOG,
        formatter_class=DeterministicHelpFormatter,
        allow_abbrev=False,
    )
    try:
        from logroll import __version__ as _VER  # lazy import to avoid side effects
    except ImportError:
        _VER = "unknown"
    parser.add_argument("--version", action="version", version=f"logroll {_VER}")
    parser.add_argument("source", help="log file to rotate")
    parser.add_argument("target", help="destination path for the rotated file")
    parser.add_argument("-c", "--config", dest="config", help="YAML settings file or directory")
    parser.add_argument("--marker", default=None, help="override the marker string")
    parser.add_argument(
        "--retries", type=int, default=None, help="transient open retries for the new file"
    )
    parser.add_argument(
        "--retry-delay-ms", type=int, default=None, help="delay between open retries"
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="print planned actions without changing files"
    )
    parser.add_argument("--json", action="store_true", help="print a JSON report instead of notices")
    parser.add_argument("--quiet", action="store_true", help="suppress progress notices")
    parser.add_argument("--verbose", action="store_true", help="increase stderr verbosity")
    parser.add_argument("--debug", action="store_true", help=argparse.SUPPRESS)
    return parser


def _cli_overrides(ns: argparse.Namespace) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if ns.marker is not None:
        out["marker"] = ns.marker
    if ns.retries is not None:
        out["open_retries"] = ns.retries
    if ns.retry_delay_ms is not None:
        out["retry_delay_ms"] = ns.retry_delay_ms
    return out


def resolve_settings(ns: argparse.Namespace) -> Settings:
    """Defaults < config file < environment < command-line flags."""
    settings = load_settings(ns.config, os.environ, discover=True, cwd=Path.cwd())
    overrides = _cli_overrides(ns)
    if overrides:
        settings = validate_settings(overrides, settings)
    return settings


def main(argv: List[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    ns = build_parser().parse_args(argv)

    set_verbosity(ns.verbose, ns.quiet or ns.json)
    configure_logging(debug=ns.debug, verbose=ns.verbose)

    try:
        settings = resolve_settings(ns)
        report = rotate(ns.source, ns.target, settings=settings, notify=notice, dry_run=ns.dry_run)
    except LogrollError as e:
        eprint(format_error(e))
        return exit_code_for(e)
    except Exception as e:
        _logger.debug("unexpected failure", exc_info=True)
        eprint(format_error(CLIError(f"{type(e).__name__}: {e}")))
        return INTERNAL_ERR

    if ns.json:
        print_json(report.as_dict())
    return OK


if __name__ == "__main__":
    raise SystemExit(main())
