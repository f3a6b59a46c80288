"""
Rename a log file aside and recreate it with a marker line.

Steps:
    source -> target            (os.replace; copy+verify+delete across devices)
    source <- marker            (append mode, resilient open, always closed)

Notes:
- An existing target is overwritten; nothing is merged or backed up.
- A missing source fails before anything is created.
- Same source and target skips the move (warning only); the marker is still appended.
- Notices go through ``notify`` (print by default); failures raise RotationError.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .config import Settings
from .errors import RecreateFailed, RenameFailed, SourceNotFound, WriteFailed
from .io.move import move_file, same_file
from .io.resilient import ResilientOutput

__all__ = ["RotationReport", "rotate"]

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RotationReport:
    source: str
    target: str
    method: str
    bytes_moved: int = 0
    marker_bytes: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _check_source(src: Path) -> int:
    try:
        st = src.stat()
    except FileNotFoundError:
        raise SourceNotFound(f"file [{src}] does not exist", path=str(src)) from None
    except OSError as e:
        raise SourceNotFound(f"file [{src}] is not accessible: {e.strerror or e}", path=str(src)) from e
    if src.is_dir():
        raise SourceNotFound(f"[{src}] is a directory, not a file", path=str(src))
    return st.st_size


def _move(src: Path, dst: Path, settings: Settings) -> str:
    try:
        return move_file(src, dst, create_dirs=settings.create_target_dirs)
    except FileNotFoundError as e:
        # Source vanished between the check and the rename.
        if not src.exists():
            raise SourceNotFound(f"file [{src}] does not exist", path=str(src)) from e
        raise RenameFailed(f"failed to rename [{src}] to [{dst}]: {e}", path=str(dst)) from e
    except OSError as e:
        raise RenameFailed(f"failed to rename [{src}] to [{dst}]: {e}", path=str(dst)) from e


def _recreate(src: Path, settings: Settings) -> int:
    data = settings.marker_bytes()
    out = ResilientOutput(
        src,
        retries=settings.open_retries,
        delay_ms=settings.retry_delay_ms,
        buffer_size=settings.buffer_size,
        fsync=settings.fsync,
    )
    try:
        out.open()
    except OSError as e:
        raise RecreateFailed(
            f"could not open [{src}] after {out.attempts} attempt(s): {e}", path=str(src)
        ) from e

    try:
        with out:
            out.write(data)
            out.flush()
    except OSError as e:
        raise WriteFailed(f"failed writing marker to [{src}]: {e}", path=str(src)) from e
    if out.attempts > 1:
        _logger.info("opened %s after %d attempts", src, out.attempts)
    return len(data)


def rotate(
    source: Path | str,
    target: Path | str,
    *,
    settings: Optional[Settings] = None,
    notify: Callable[[str], None] = print,
    dry_run: bool = False,
) -> RotationReport:
    """Move *source* to *target*, then recreate *source* holding the marker.

    Raises SourceNotFound, RenameFailed, RecreateFailed or WriteFailed.
    """
    settings = settings or Settings()
    src = Path(os.fspath(source))
    dst = Path(os.fspath(target))

    notify(f"rename {src} to {dst}")
    size = _check_source(src)

    same = same_file(src, dst)
    if same:
        _logger.warning("source and target are the same file [%s], skipping rename", src)
        size = 0

    if dry_run:
        if not same:
            notify(f"mv {src} {dst}")
        notify(f"create {src} ({len(settings.marker_bytes())} bytes)")
        return RotationReport(str(src), str(dst), "dry-run", bytes_moved=size)

    if same:
        method = "noop"
    else:
        method = _move(src, dst, settings)
        _logger.debug("moved %s -> %s via %s (%d bytes)", src, dst, method, size)

    notify(f"create new file {src}")
    written = _recreate(src, settings)

    notify("over")
    return RotationReport(str(src), str(dst), method, bytes_moved=size, marker_bytes=written)
