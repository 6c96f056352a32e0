"""
Git queries for stack-refresh.

Branch-changing git commands (fetch, checkout, pull) are ordinary
pipeline steps run through the stack adapter. This module only holds
the read-only queries whose answers feed gate decisions.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from .errors import GitError

LOG = logging.getLogger(__name__)

# Messages git prints when a branch simply has nothing to pull from.
_NO_UPSTREAM_MARKERS = (
    "no upstream configured",
    "no such branch",
    "does not point to a branch",
)


def _run_git(
    args: Sequence[str],
    git: Sequence[str] = ("git",),
    cwd: Optional[Path] = None,
) -> subprocess.CompletedProcess[str]:
    """
    Run a git query and return the completed process.

    Non-zero exits are returned to the caller, which decides what they
    mean; only a git that cannot be started at all is an error.
    """

    cmd = [*git, *args]
    LOG.debug("Running git command: %s", " ".join(cmd))
    try:
        return subprocess.run(
            cmd,
            cwd=cwd,
            check=False,
            text=True,
            capture_output=True,
        )
    except OSError as exc:
        raise GitError(f"failed to execute git: {exc}") from exc


def upstream_branch_exists(
    branch: str,
    git: Sequence[str] = ("git",),
    cwd: Optional[Path] = None,
) -> bool:
    """
    Return True if the local branch tracks a remote branch.

    A missing upstream or a missing local branch answers False. Any
    other failure (detached HEAD, broken repository) also answers False
    so the pull is skipped rather than failing the run, but the reason
    is logged instead of being mistaken for "no upstream".
    """

    completed = _run_git(
        ["rev-parse", "--abbrev-ref", "--symbolic-full-name", f"{branch}@{{upstream}}"],
        git=git,
        cwd=cwd,
    )
    if completed.returncode == 0:
        LOG.debug("Branch %s tracks %s", branch, completed.stdout.strip())
        return True

    stderr = completed.stderr.strip()
    if any(marker in stderr for marker in _NO_UPSTREAM_MARKERS):
        LOG.info("Branch %s has no upstream branch", branch)
    else:
        LOG.warning(
            "Could not determine upstream branch for %s (git exit %d): %s",
            branch,
            completed.returncode,
            stderr or "no error output",
        )
    return False
