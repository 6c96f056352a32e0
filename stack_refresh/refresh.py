"""
High-level orchestration for stack-refresh.

A refresh is three phases, in order:
  - validation of flag combinations and prerequisites,
  - confirmation of destructive steps, and
  - execution of the fixed step sequence.
Nothing is executed until the first two phases have passed.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .config import Config, Toolchain
from .confirm import InputFunc
from .environment import Environment
from .pipeline import RunContext, Step, run_pipeline
from .preflight import confirm_destructive_steps, validate_config
from .steps import STEPS

LOG = logging.getLogger(__name__)


def run_refresh(
    config: Config,
    toolchain: Optional[Toolchain] = None,
    environment: Optional[Environment] = None,
    input_func: Optional[InputFunc] = None,
    steps: Sequence[Step] = STEPS,
) -> None:
    """
    Entry point for the main CLI command.

    Raises a RefreshError subclass describing why the run stopped early;
    returns normally when every permitted step succeeded.
    """

    LOG.debug("Starting stack-refresh with config: %s", config)

    if toolchain is None:
        toolchain = Toolchain.from_env()
    if environment is None:
        environment = Environment(toolchain)

    validate_config(config, environment)
    confirm_destructive_steps(config, environment, input_func=input_func)

    context = RunContext(config=config, toolchain=toolchain, environment=environment)
    run_pipeline(steps, context)

    LOG.info("Refresh complete")
