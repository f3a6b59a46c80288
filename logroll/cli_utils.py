from __future__ import annotations

import argparse

HELP_EPILOG = "Exit codes: 0 ok, 2 usage/config, 3 source missing, 4 rename, 5 recreate, 6 write."


class DeterministicHelpFormatter(argparse.ArgumentDefaultsHelpFormatter):
    """
    Help formatter with fixed width/positions so `--help` output is deterministic
    across OS/terminals and independent of runtime terminal width.
    """

    def __init__(self, *args, **kwargs):
        # Fix wrap width and help column so CI/OS differences don't change text.
        kwargs.setdefault("max_help_position", 28)
        kwargs.setdefault("width", 80)
        super().__init__(*args, **kwargs)


__all__ = [
    "HELP_EPILOG",
    "DeterministicHelpFormatter",
]
