"""
Live facts about the development stack.

The Environment answers questions on demand and never caches the
answers: every call re-queries git, the filesystem or the CMS, so a
gate evaluated after the checkout step sees the new branch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .config import Toolchain
from .errors import EnvironmentMismatchError
from .git_adapter import upstream_branch_exists
from .stack import capture_command

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Environment:
    toolchain: Toolchain

    def upstream_exists(self, branch: str) -> bool:
        return upstream_branch_exists(
            branch,
            git=self.toolchain.git,
            cwd=self.toolchain.project_root,
        )

    def has_existing_dump(self) -> bool:
        return self.toolchain.dump_file.is_file()

    def config_drift(self) -> Optional[str]:
        """
        Return the list of configuration items that differ between the
        database and the exported configuration, or None when in sync.

        Raises EnvironmentMismatchError when the CMS cannot report its
        configuration status at all; that usually means the code and
        the database no longer match and only a database import can
        recover.
        """

        completed = capture_command(
            self.toolchain.drush_command("config:status", "--format=list"),
            cwd=self.toolchain.project_root,
        )
        if completed.returncode != 0:
            detail = completed.stderr.strip()
            raise EnvironmentMismatchError(
                "unable to inspect configuration status"
                + (f" ({detail})" if detail else "")
                + "; the code and database are probably out of step. "
                "Re-run with --import-db to start from a fresh database."
            )

        drift = completed.stdout.strip()
        LOG.debug("Configuration status: %s", drift or "in sync")
        return drift or None
