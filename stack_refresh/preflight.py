"""
Checks that run before any pipeline step.

Invalid flag combinations and missing prerequisites fail here with a
usage error, and destructive steps are confirmed here, so an aborted
run never leaves the stack half refreshed.
"""

from __future__ import annotations

from typing import Optional

from .config import Config
from .confirm import ConfirmationPrompt, InputFunc, require_confirmation
from .environment import Environment
from .errors import UsageError
from .gates import can_import_db, can_run_update, can_use_existing_dump

DRIFT_PROMPT = ConfirmationPrompt(
    question="Discard the configuration changes listed above?",
    fallback_guidance=(
        "Export the configuration first (drush config:export) and commit "
        "it, or re-run with --no-update to keep it in the database."
    ),
)

IMPORT_PROMPT = ConfirmationPrompt(
    question="Importing the database discards all local content changes. Continue?",
    fallback_guidance="Re-run without --import-db to keep the current database.",
)


def validate_config(config: Config, environment: Environment) -> None:
    """
    Validate flag combinations that the parser cannot check alone.
    """

    if config.use_existing_sql and not config.import_db:
        raise UsageError(
            "--existing-sql requires --import-db; "
            "re-run with --import-db --existing-sql"
        )

    if can_use_existing_dump(config, environment) and not environment.has_existing_dump():
        raise UsageError(
            "--import-db --existing-sql needs a previously downloaded dump at "
            f"{environment.toolchain.dump_file}; run once without --existing-sql"
        )


def confirm_destructive_steps(
    config: Config,
    environment: Environment,
    input_func: Optional[InputFunc] = None,
) -> None:
    """
    Ask for confirmation before steps that throw away local state.

    Configuration drift only matters when updates will import the
    exported configuration over the database; with --import-db the
    database is replaced anyway and the import prompt covers it.
    """

    if config.dry_run:
        return

    if can_run_update(config, environment) and not config.import_db:
        drift = environment.config_drift()
        if drift is not None:
            print("Configuration in the database differs from the exported configuration:")
            print(drift, flush=True)
            require_confirmation(
                DRIFT_PROMPT,
                skip_prompts=config.skip_prompts,
                input_func=input_func,
            )

    if can_import_db(config, environment):
        require_confirmation(
            IMPORT_PROMPT,
            skip_prompts=config.skip_prompts,
            input_func=input_func,
        )
