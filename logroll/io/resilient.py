from __future__ import annotations

import errno
import logging
import os
import time
from pathlib import Path
from typing import BinaryIO, Callable, Optional

__all__ = ["ResilientOutput", "TRANSIENT_ERRNOS", "is_transient"]

_logger = logging.getLogger(__name__)

# errno values worth another open attempt; anything else fails immediately.
TRANSIENT_ERRNOS = frozenset(
    {
        errno.EAGAIN,
        errno.EBUSY,
        errno.EINTR,
        errno.ETXTBSY,
        errno.EACCES,
        errno.EPERM,
    }
)


def is_transient(e: OSError) -> bool:
    # Sharing violations on Windows surface as PermissionError without a usable errno.
    if isinstance(e, PermissionError):
        return True
    return e.errno in TRANSIENT_ERRNOS


class ResilientOutput:
    """Append-mode output file that survives its directory being removed.

    ``open()`` recreates a missing parent directory once and retries transient
    failures up to ``retries`` times, sleeping ``delay_ms`` between attempts.
    Use as a context manager so the handle is released on every exit path.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        retries: int = 3,
        delay_ms: int = 100,
        buffer_size: int = 4096,
        fsync: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.path = Path(path)
        self.retries = max(0, int(retries))
        self.delay_ms = max(0, int(delay_ms))
        self.buffer_size = buffer_size
        self.fsync = fsync
        self.attempts = 0
        self._sleep = sleep
        self._fh: Optional[BinaryIO] = None

    @property
    def closed(self) -> bool:
        return self._fh is None

    def _open_once(self) -> BinaryIO:
        self.attempts += 1
        return open(self.path, "ab", buffering=self.buffer_size)

    def open(self) -> "ResilientOutput":
        if self._fh is not None:
            return self
        dir_recreated = False
        transient_left = self.retries
        while True:
            try:
                self._fh = self._open_once()
                return self
            except FileNotFoundError:
                if dir_recreated or self.path.parent.exists():
                    raise
                _logger.warning("parent directory %s vanished, recreating it", self.path.parent)
                self.path.parent.mkdir(parents=True, exist_ok=True)
                dir_recreated = True
            except OSError as e:
                if not is_transient(e) or transient_left <= 0:
                    raise
                transient_left -= 1
                _logger.warning(
                    "open %s failed (%s), retrying in %dms (%d left)",
                    self.path,
                    e,
                    self.delay_ms,
                    transient_left,
                )
                self._sleep(self.delay_ms / 1000.0)

    def write(self, data: bytes) -> int:
        if self._fh is None:
            raise ValueError("write to closed ResilientOutput")
        n = self._fh.write(data)
        if n is not None and n != len(data):
            raise OSError(errno.EIO, f"short write ({n} of {len(data)} bytes)", str(self.path))
        return len(data)

    def flush(self) -> None:
        if self._fh is None:
            return
        self._fh.flush()
        if self.fsync:
            os.fsync(self._fh.fileno())

    def close(self) -> None:
        fh, self._fh = self._fh, None
        if fh is None:
            return
        try:
            fh.flush()
            if self.fsync:
                os.fsync(fh.fileno())
        finally:
            fh.close()

    def __enter__(self) -> "ResilientOutput":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
            return
        # Already failing: release the handle but let the original error win.
        try:
            self.close()
        except OSError as close_err:
            _logger.debug("close after failure also failed: %s", close_err)
