"""
Custom exception types used across stack-refresh.

Each error carries the process exit status the CLI should report, so
the command-line layer can map failures to exit codes without knowing
where they were raised.
"""

from __future__ import annotations

from typing import Optional


class RefreshError(Exception):
    """Base class for all stack-refresh specific errors."""

    exit_code = 1


class UsageError(RefreshError):
    """Raised for a malformed invocation or a missing prerequisite."""

    exit_code = 2


class EnvironmentMismatchError(UsageError):
    """Raised when live environment state rules out the requested run."""


class GitError(RefreshError):
    """Raised when a git query cannot be executed."""


class StepFailure(RefreshError):
    """
    Raised when a fail-fast step returns a non-zero status.

    The step's own status becomes the exit status of the whole run. A
    child killed by signal N (returncode -N) exits as 128 + N.
    """

    def __init__(self, step: str, returncode: int) -> None:
        super().__init__(f"step '{step}' failed with exit status {returncode}")
        self.step = step
        self.returncode = returncode
        self.exit_code = returncode if returncode > 0 else 128 - returncode


class UserDeclined(RefreshError):
    """Raised when the operator answers a confirmation negatively."""

    exit_code = 0

    def __init__(self, guidance: Optional[str] = None) -> None:
        super().__init__(guidance or "aborted at operator request")
        self.guidance = guidance
