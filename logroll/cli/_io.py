from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any

# Verbosity gates
VERBOSE = False
QUIET = False

_LOG_FORMAT = "[logroll] %(levelname)s %(name)s: %(message)s"

# Handler installed by the last configure_logging() call.
_HANDLER: logging.Handler | None = None


def set_verbosity(verbose: bool = False, quiet: bool = False) -> None:
    global VERBOSE, QUIET
    VERBOSE, QUIET = bool(verbose), bool(quiet)


def configure_logging(*, debug: bool = False, verbose: bool = False) -> None:
    """Route `logroll.*` loggers to stderr; stdout stays reserved for notices."""
    global _HANDLER
    if debug or os.getenv("LOGROLL_DEBUG") == "1":
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    root = logging.getLogger("logroll")
    root.setLevel(level)
    # Rebind to the current sys.stderr on every call; main() may run repeatedly in one process.
    if _HANDLER is not None:
        root.removeHandler(_HANDLER)
    _HANDLER = logging.StreamHandler(sys.stderr)
    _HANDLER.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(_HANDLER)


def notice(msg: str) -> None:
    if not QUIET:
        print(msg, flush=True)


def eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def print_json(obj: Any) -> None:
    """Dump obj using compact, stable separators (no color)."""
    sys.stdout.write(json.dumps(obj, separators=(",", ":"), sort_keys=True) + "\n")


__all__ = [
    "configure_logging",
    "eprint",
    "notice",
    "print_json",
    "set_verbosity",
]
