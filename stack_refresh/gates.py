"""
Gate predicates deciding which pipeline steps may run.

Each gate is a plain function of the run configuration and the live
environment so it can be read and tested on its own. Only
can_pull_updates consults the environment.
"""

from __future__ import annotations

from typing import Callable

from .config import Config
from .environment import Environment

Gate = Callable[[Config, Environment], bool]


def can_change_branch(config: Config, environment: Environment) -> bool:
    return config.branch is not None


def can_pull_updates(config: Config, environment: Environment) -> bool:
    if config.skip_git_pull or config.branch is None:
        return False
    return environment.upstream_exists(config.branch)


def can_restart(config: Config, environment: Environment) -> bool:
    return not config.skip_restart


def can_build_dependencies(config: Config, environment: Environment) -> bool:
    return not config.skip_dependency_build


def can_build_assets(config: Config, environment: Environment) -> bool:
    return not config.skip_asset_build


def can_import_db(config: Config, environment: Environment) -> bool:
    return config.import_db


def can_download_db(config: Config, environment: Environment) -> bool:
    return not config.use_existing_sql


def can_use_existing_dump(config: Config, environment: Environment) -> bool:
    return config.use_existing_sql


def can_run_update(config: Config, environment: Environment) -> bool:
    return not config.skip_update


def can_login(config: Config, environment: Environment) -> bool:
    return not config.skip_login


def always(config: Config, environment: Environment) -> bool:
    return True


def all_of(*gates: Gate) -> Gate:
    """Combine gates so a step runs only when every one of them allows it."""

    def combined(config: Config, environment: Environment) -> bool:
        return all(gate(config, environment) for gate in gates)

    return combined
