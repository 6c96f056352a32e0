"""
Execution of external commands for stack-refresh.

Every pipeline command goes through run_command so that each one is
announced before it runs and followed by a separator line, whatever
tool it invokes. Output is not captured: the operator sees the child's
own output as it happens.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Sequence

LOG = logging.getLogger(__name__)

SEPARATOR = "-" * 72

# Status reported when a command cannot be started, as a shell would.
COMMAND_NOT_FOUND = 127


def format_command(cmd: Sequence[str]) -> str:
    return shlex.join(cmd)


def run_command(
    cmd: Sequence[str],
    cwd: Optional[Path] = None,
    dry_run: bool = False,
) -> int:
    """
    Announce, run and close off a single command, returning its status.

    In dry-run mode the command is announced but not executed and
    reported as successful.
    """

    if dry_run:
        print(f"$ {format_command(cmd)}  (dry run)", flush=True)
        return 0

    print(f"$ {format_command(cmd)}", flush=True)
    try:
        completed = subprocess.run(list(cmd), cwd=cwd, check=False)
        returncode = completed.returncode
    except OSError as exc:
        LOG.error("Failed to execute %s: %s", cmd[0], exc)
        returncode = COMMAND_NOT_FOUND
    print(SEPARATOR, flush=True)
    return returncode


def capture_command(
    cmd: Sequence[str],
    cwd: Optional[Path] = None,
) -> subprocess.CompletedProcess[str]:
    """
    Run a read-only query command and capture its output.

    A command that cannot be started is reported as a completed process
    with status 127 so callers treat it like any other failed query.
    """

    LOG.debug("Running query: %s", format_command(cmd))
    try:
        completed = subprocess.run(
            list(cmd),
            cwd=cwd,
            check=False,
            text=True,
            capture_output=True,
        )
    except OSError as exc:
        return subprocess.CompletedProcess(
            args=list(cmd), returncode=COMMAND_NOT_FOUND, stdout="", stderr=str(exc)
        )
    if completed.returncode != 0:
        LOG.debug("Query stderr: %s", completed.stderr)
    return completed
