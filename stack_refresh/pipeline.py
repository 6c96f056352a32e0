"""
Step model and executor for the refresh pipeline.

Steps run strictly in the order given. Whether a failing step halts
the run is declared on the step itself through its Policy rather than
decided by the executor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Sequence

from .config import Config, Toolchain
from .environment import Environment
from .errors import StepFailure
from .gates import Gate
from .stack import run_command

LOG = logging.getLogger(__name__)


class Policy(Enum):
    FAIL_FAST = "fail-fast"
    BEST_EFFORT = "best-effort"


@dataclass(frozen=True)
class RunContext:
    """Everything a step action needs for one invocation."""

    config: Config
    toolchain: Toolchain
    environment: Environment


Action = Callable[[RunContext], int]
CommandBuilder = Callable[[RunContext], List[str]]


@dataclass(frozen=True)
class Step:
    name: str
    gate: Gate
    action: Action
    policy: Policy = Policy.FAIL_FAST


def command_step(
    name: str,
    gate: Gate,
    build: CommandBuilder,
    policy: Policy = Policy.FAIL_FAST,
) -> Step:
    """
    Define a step that runs one external command.

    The command line is built when the step runs, from that run's
    configuration and toolchain.
    """

    def action(context: RunContext) -> int:
        return run_command(
            build(context),
            cwd=context.toolchain.project_root,
            dry_run=context.config.dry_run,
        )

    return Step(name=name, gate=gate, action=action, policy=policy)


def run_pipeline(steps: Sequence[Step], context: RunContext) -> None:
    """
    Run each permitted step in order.

    Raises StepFailure for the first fail-fast step that returns a
    non-zero status; best-effort failures are logged and skipped past.
    """

    for step in steps:
        if not step.gate(context.config, context.environment):
            if context.config.verbosity > 0:
                LOG.info("Skipping %s", step.name)
            continue

        LOG.debug("Running %s", step.name)
        returncode = step.action(context)
        if returncode == 0:
            continue

        if step.policy is Policy.BEST_EFFORT:
            if context.config.verbosity > 0:
                LOG.info(
                    "Tolerated failure of %s (exit status %d); continuing",
                    step.name,
                    returncode,
                )
            continue

        raise StepFailure(step.name, returncode)
