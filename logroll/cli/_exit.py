from __future__ import annotations

from ..errors import (
    ConfigError,
    RecreateFailed,
    RenameFailed,
    SourceNotFound,
    WriteFailed,
)

OK = 0
INTERNAL_ERR = 1
USER_ERR = 2
SOURCE_ERR = 3
RENAME_ERR = 4
RECREATE_ERR = 5
WRITE_ERR = 6

# Most specific first; unknown failures map to INTERNAL_ERR.
_CODES = (
    (ConfigError, USER_ERR),
    (SourceNotFound, SOURCE_ERR),
    (RenameFailed, RENAME_ERR),
    (RecreateFailed, RECREATE_ERR),
    (WriteFailed, WRITE_ERR),
)


def exit_code_for(e: BaseException) -> int:
    for cls, code in _CODES:
        if isinstance(e, cls):
            return code
    return INTERNAL_ERR


__all__ = [
    "INTERNAL_ERR",
    "OK",
    "RECREATE_ERR",
    "RENAME_ERR",
    "SOURCE_ERR",
    "USER_ERR",
    "WRITE_ERR",
    "exit_code_for",
]
