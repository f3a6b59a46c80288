from __future__ import annotations

import errno
import hashlib
import logging
import os
import shutil
import tempfile
from pathlib import Path

__all__ = ["move_file", "same_file", "file_digest"]

_logger = logging.getLogger(__name__)

_CHUNK = 1 << 16


def _fsync_best_effort(path: Path) -> None:
    """Best-effort directory fsync for durability.

    On Windows, fsync on directories may fail; ignore in that case.
    """
    try:
        fd = os.open(str(path), os.O_RDONLY)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)
    except OSError:
        pass


def file_digest(path: Path | str) -> tuple[str, int]:
    """Return (sha256 hex digest, size in bytes) of *path*."""
    h = hashlib.sha256()
    size = 0
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK), b""):
            h.update(chunk)
            size += len(chunk)
    return h.hexdigest(), size


def same_file(a: Path | str, b: Path | str) -> bool:
    """True when both paths name the same file (or the same location)."""
    try:
        return os.path.samefile(a, b)
    except OSError:
        return os.path.abspath(a) == os.path.abspath(b)


def _copy_then_delete(src: Path, dst: Path) -> None:
    """Copy *src* beside *dst*, verify it, swap it in, then unlink *src*.

    The source is only removed once the copy at *dst* matches it byte for byte.
    """
    want_digest, want_size = file_digest(src)
    fd, tmp_name = tempfile.mkstemp(prefix=dst.name + ".", dir=str(dst.parent))
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as out, open(src, "rb") as inp:
            shutil.copyfileobj(inp, out, _CHUNK)
            out.flush()
            os.fsync(out.fileno())
        try:
            shutil.copymode(src, tmp)
        except OSError:
            pass
        got_digest, got_size = file_digest(tmp)
        if (got_digest, got_size) != (want_digest, want_size):
            raise OSError(
                errno.EIO,
                f"copy verification failed ({got_size} of {want_size} bytes)",
                str(dst),
            )
        os.replace(tmp, dst)
    except BaseException:
        try:
            if tmp.exists():
                tmp.unlink()
        finally:
            raise
    _fsync_best_effort(dst.parent)
    os.unlink(src)


def move_file(source: Path | str, target: Path | str, *, create_dirs: bool = True) -> str:
    """Move *source* to *target*, overwriting an existing target.

    Tries an atomic ``os.replace`` first. When the two paths live on different
    devices (``EXDEV``) the file is copied, verified, and only then deleted.

    Returns the method used: ``"rename"`` or ``"copy"``.
    Raises FileNotFoundError if *source* is missing, OSError for anything else.
    """
    src = Path(source)
    dst = Path(target)

    if not src.exists():
        raise FileNotFoundError(errno.ENOENT, "source file does not exist", str(src))
    if src.is_dir():
        raise IsADirectoryError(errno.EISDIR, "source is a directory", str(src))

    if create_dirs and not dst.parent.exists():
        _logger.debug("creating missing target directory %s", dst.parent)
        dst.parent.mkdir(parents=True, exist_ok=True)

    try:
        os.replace(src, dst)
        _fsync_best_effort(dst.parent)
        return "rename"
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        _logger.info("%s and %s are on different devices, falling back to copy", src, dst)

    _copy_then_delete(src, dst)
    return "copy"
