"""logroll — rename a log file aside and recreate it with a marker.

Public surface: `rotate`, `RotationReport`, `Settings`, `load_settings` and
the `logroll.errors` taxonomy. Everything else is internal.
"""
from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from . import errors as errors  # re-export for star-import; noqa: F401
from .config import Settings, load_settings
from .rotator import RotationReport, rotate


def _version_from_metadata() -> str | None:
    try:
        return _pkg_version("logroll")
    except PackageNotFoundError:
        return None


__version__ = _version_from_metadata() or "0+unknown"

# Star-export surface (deterministic ordering).
__all__ = [
    "RotationReport",
    "Settings",
    "__version__",
    "errors",
    "load_settings",
    "rotate",
]
