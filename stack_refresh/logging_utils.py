"""
Logging helpers for stack-refresh.

Diagnostics go to stderr through the logging module. Command
announcements are printed to stdout by the stack adapter so they stay
in order with the output of the commands themselves.
"""

from __future__ import annotations

import logging
import sys


def level_for_verbosity(verbosity: int) -> int:
    """
    Map the -v repeat count to a logging level.

    0 shows warnings only, 1 adds skip notices and tolerated failures,
    2 and above add debug detail such as captured command output.
    """

    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def configure_logging(verbosity: int) -> None:
    logging.basicConfig(
        level=level_for_verbosity(verbosity),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
