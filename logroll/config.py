"""
Rotation settings: defaults, YAML loading, env overrides and validation.

Public API:
    Settings                       frozen dataclass of tunables
    find_config(explicit, cwd, env) -> Path | None
    load_settings(path, env, discover=...) -> Settings
    validate_settings(raw)   -> Settings

- Raises ConfigError with clear messages (field names + constraints) on invalid input.
- YAML files hold a top-level ``rotation:`` mapping; a bare mapping is accepted too.
- Search order without an explicit path: $LOGROLL_CONFIG, ./configs/logroll.yaml,
  $XDG_CONFIG_HOME/logroll/logroll.yaml. A directory stands for logroll.yaml inside it.
"""
from __future__ import annotations

import codecs
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional

import yaml

from .errors import ConfigError

__all__ = [
    "DEFAULT_MARKER",
    "CONFIG_NAME",
    "ENV_OVERRIDES",
    "Settings",
    "find_config",
    "load_settings",
    "validate_settings",
]

_logger = logging.getLogger(__name__)

DEFAULT_MARKER = "logback rolling over"
CONFIG_NAME = "logroll.yaml"


@dataclass(frozen=True)
class Settings:
    marker: str = DEFAULT_MARKER
    encoding: str = "utf-8"
    open_retries: int = 3
    retry_delay_ms: int = 100
    buffer_size: int = 4096
    create_target_dirs: bool = True
    fsync: bool = False

    def marker_bytes(self) -> bytes:
        return self.marker.encode(self.encoding)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


# env var -> Settings field
ENV_OVERRIDES: Dict[str, str] = {
    "LOGROLL_MARKER": "marker",
    "LOGROLL_OPEN_RETRIES": "open_retries",
    "LOGROLL_RETRY_DELAY_MS": "retry_delay_ms",
    "LOGROLL_FSYNC": "fsync",
}


# ------------------------------
# Utilities
# ------------------------------

def _coerce_bool(name: str, v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, int):
        return bool(v)
    if isinstance(v, str):
        s = v.strip().lower()
        if s in {"1", "true", "yes", "on"}:
            return True
        if s in {"0", "false", "no", "off"}:
            return False
    raise ConfigError(f"{name}: expected a boolean, got {v!r}")


def _coerce_int(name: str, v: Any, *, minimum: int) -> int:
    if isinstance(v, bool):
        raise ConfigError(f"{name}: expected an integer, got {v!r}")
    try:
        n = int(v)
    except (TypeError, ValueError):
        raise ConfigError(f"{name}: expected an integer, got {v!r}") from None
    if n < minimum:
        raise ConfigError(f"{name}: must be >= {minimum}, got {n}")
    return n


def _coerce_str(name: str, v: Any) -> str:
    if not isinstance(v, str):
        raise ConfigError(f"{name}: expected a string, got {v!r}")
    return v


# ------------------------------
# Validation
# ------------------------------

def validate_settings(raw: Mapping[str, Any], base: Optional[Settings] = None) -> Settings:
    """Validate a mapping of Settings fields on top of *base* (defaults if None)."""
    if not isinstance(raw, Mapping):
        raise ConfigError(f"rotation: expected a mapping, got {type(raw).__name__}")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"rotation: unknown keys {unknown} (allowed: {sorted(known)})")

    out: Dict[str, Any] = {}
    for k, v in raw.items():
        name = f"rotation.{k}"
        if k in ("marker", "encoding"):
            out[k] = _coerce_str(name, v)
        elif k == "open_retries":
            out[k] = _coerce_int(name, v, minimum=0)
        elif k == "retry_delay_ms":
            out[k] = _coerce_int(name, v, minimum=0)
        elif k == "buffer_size":
            out[k] = _coerce_int(name, v, minimum=1)
        elif k in ("create_target_dirs", "fsync"):
            out[k] = _coerce_bool(name, v)

    settings = replace(base or Settings(), **out)

    try:
        codecs.lookup(settings.encoding)
    except LookupError:
        raise ConfigError(f"rotation.encoding: unknown codec {settings.encoding!r}") from None
    try:
        settings.marker_bytes()
    except UnicodeEncodeError as e:
        raise ConfigError(f"rotation.marker: not encodable as {settings.encoding}: {e}") from None
    return settings


def _env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    return {field: env[var] for var, field in ENV_OVERRIDES.items() if var in env}


# ---- loader ---------------------------------------------------------------

def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"config file not found: {path}") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from None
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    if "rotation" in data:
        extra = sorted(k for k in data if k != "rotation")
        if extra:
            raise ConfigError(f"{path}: unknown top-level keys {extra}")
        section = data["rotation"] or {}
        if not isinstance(section, dict):
            raise ConfigError(f"{path}: 'rotation' must be a mapping")
        return section
    return data


def _config_file(p: Path) -> Optional[Path]:
    if p.is_dir():
        p = p / CONFIG_NAME
    return p.resolve() if p.is_file() else None


def _search_path(cwd: Path, env: Mapping[str, str]) -> Iterator[Path]:
    if env.get("LOGROLL_CONFIG"):
        yield Path(os.path.expandvars(env["LOGROLL_CONFIG"])).expanduser()
    yield cwd / "configs" / CONFIG_NAME
    xdg = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    yield Path(xdg).expanduser() / "logroll" / CONFIG_NAME


def find_config(
    explicit: Path | str | None = None,
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """Return the config file to use, or None when nothing is found.

    An explicit path must exist; a missing one raises ConfigError instead of
    falling through to the search path.
    """
    env = os.environ if env is None else env
    if explicit:
        found = _config_file(Path(os.path.expandvars(str(explicit))).expanduser())
        if found is None:
            raise ConfigError(f"config file not found: {explicit}")
        return found
    for candidate in _search_path(cwd or Path.cwd(), env):
        found = _config_file(candidate)
        if found is not None:
            return found
    return None


def load_settings(
    path: Path | str | None = None,
    env: Optional[Mapping[str, str]] = None,
    *,
    discover: bool = False,
    cwd: Optional[Path] = None,
) -> Settings:
    """
    Load settings with precedence: defaults < YAML file < environment.

    With ``discover`` the file is located through find_config (so *path* acts
    as the explicit ``--config`` value); otherwise a None path skips the file
    layer. Env defaults to os.environ.
    """
    env = os.environ if env is None else env
    if discover or path is not None:
        path = find_config(path, cwd, env)
        _logger.info("config: selected=%s", path if path else "none")
    settings = Settings()
    if path is not None:
        settings = validate_settings(_read_yaml(Path(path)), settings)
    overrides = _env_overrides(env)
    if overrides:
        settings = validate_settings(overrides, settings)
    return settings
