"""
The fixed refresh sequence.

STEPS is the outer pipeline; UPDATE_STEPS is the CMS maintenance
sequence that runs as its single "update" step.
"""

from __future__ import annotations

from typing import List

from .gates import (
    all_of,
    always,
    can_build_assets,
    can_build_dependencies,
    can_change_branch,
    can_download_db,
    can_import_db,
    can_login,
    can_pull_updates,
    can_restart,
    can_run_update,
)
from .pipeline import Policy, RunContext, Step, command_step, run_pipeline


def _with_verbosity(context: RunContext, cmd: List[str]) -> List[str]:
    flag = context.config.verbosity_flag
    return [*cmd, flag] if flag else cmd


def _drush(context: RunContext, *args: str) -> List[str]:
    return _with_verbosity(context, context.toolchain.drush_command(*args))


def _fetch(context: RunContext) -> List[str]:
    return context.toolchain.git_command("fetch", "--prune", context.toolchain.remote)


def _checkout(context: RunContext) -> List[str]:
    return context.toolchain.git_command("checkout", context.config.branch or "")


def _pull(context: RunContext) -> List[str]:
    return context.toolchain.git_command("pull", "--ff-only")


def _restart(context: RunContext) -> List[str]:
    return context.toolchain.stack_command("restart")


def _composer_install(context: RunContext) -> List[str]:
    return _with_verbosity(context, context.toolchain.stack_command("composer", "install"))


def _build_assets(context: RunContext) -> List[str]:
    return context.toolchain.stack_command("exec", *context.toolchain.asset_build)


def _download_db(context: RunContext) -> List[str]:
    return context.toolchain.stack_command(
        "pull", context.toolchain.db_provider, "--skip-files", "--skip-import", "-y"
    )


def _import_db(context: RunContext) -> List[str]:
    return context.toolchain.stack_command(
        "import-db", f"--file={context.toolchain.dump_path}"
    )


def _login(context: RunContext) -> List[str]:
    return _drush(context, "user:login")


# Config import runs twice: entities whose dependencies are not declared
# can be skipped by the first pass, so only the second one must succeed.
UPDATE_STEPS = (
    command_step(
        "clear cache bin",
        always,
        lambda context: _drush(context, "cache:clear", "bin", context.toolchain.cache_bin),
    ),
    command_step(
        "database updates",
        always,
        lambda context: _drush(context, "updatedb", "--no-post-updates", "-y"),
    ),
    command_step(
        "configuration import",
        always,
        lambda context: _drush(context, "config:import", "-y"),
        policy=Policy.BEST_EFFORT,
    ),
    command_step(
        "configuration import (final)",
        always,
        lambda context: _drush(context, "config:import", "-y"),
    ),
    command_step(
        "post-update hooks",
        always,
        lambda context: _drush(context, "updatedb", "-y"),
    ),
    command_step(
        "cache rebuild",
        always,
        lambda context: _drush(context, "cache:rebuild"),
    ),
)


def _run_updates(context: RunContext) -> int:
    run_pipeline(UPDATE_STEPS, context)
    return 0


STEPS = (
    command_step("fetch branches", can_change_branch, _fetch),
    command_step("checkout branch", can_change_branch, _checkout),
    command_step("pull updates", can_pull_updates, _pull),
    command_step("restart stack", can_restart, _restart),
    command_step("install dependencies", can_build_dependencies, _composer_install),
    command_step("build assets", can_build_assets, _build_assets),
    command_step("download database", all_of(can_import_db, can_download_db), _download_db),
    command_step("import database", can_import_db, _import_db),
    Step(name="update", gate=can_run_update, action=_run_updates),
    command_step("login", can_login, _login),
)
