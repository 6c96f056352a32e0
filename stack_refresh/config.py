"""
Configuration model for stack-refresh.

The CLI constructs a Config instance once per invocation and passes it
down into gates, preflight checks and steps, so behavior never depends
on global state. Toolchain describes which external commands the steps
run; it is read from the process environment so the same pipeline can
drive a differently named stack.
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional


@dataclass(frozen=True)
class Config:
    """
    Top-level configuration for a stack-refresh run.

    Every skip_* flag defaults to False so a bare invocation runs every
    non-destructive step.
    """

    branch: Optional[str] = None
    verbosity: int = 0
    skip_prompts: bool = False
    import_db: bool = False
    use_existing_sql: bool = False
    skip_git_pull: bool = False
    skip_restart: bool = False
    skip_dependency_build: bool = False
    skip_asset_build: bool = False
    skip_update: bool = False
    skip_login: bool = False
    dry_run: bool = False

    @property
    def verbosity_flag(self) -> Optional[str]:
        """Verbosity as a child-command argument, e.g. level 2 -> "-vv"."""

        if self.verbosity <= 0:
            return None
        return "-" + "v" * self.verbosity


ENV_PREFIX = "STACK_REFRESH_"


def _env_words(env: Mapping[str, str], name: str, default: str) -> List[str]:
    value = env.get(ENV_PREFIX + name, "").strip()
    return shlex.split(value or default)


def _env_value(env: Mapping[str, str], name: str, default: str) -> str:
    return env.get(ENV_PREFIX + name, "").strip() or default


@dataclass(frozen=True)
class Toolchain:
    """
    External commands and paths used by the pipeline steps.

    Command prefixes are stored pre-split so they can be extended with
    arguments without any shell quoting.
    """

    git: List[str] = field(default_factory=lambda: ["git"])
    remote: str = "origin"
    stack: List[str] = field(default_factory=lambda: ["ddev"])
    asset_build: List[str] = field(default_factory=lambda: ["npm", "run", "build"])
    db_provider: str = "platform"
    dump_path: str = ".ddev/.downloads/db.sql.gz"
    cache_bin: str = "discovery"
    project_root: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Toolchain":
        """
        Build a Toolchain from STACK_REFRESH_* environment variables.

        Unset or empty variables keep their defaults.
        """

        if env is None:
            env = os.environ
        return cls(
            git=_env_words(env, "GIT", "git"),
            remote=_env_value(env, "REMOTE", "origin"),
            stack=_env_words(env, "STACK", "ddev"),
            asset_build=_env_words(env, "ASSET_BUILD", "npm run build"),
            db_provider=_env_value(env, "DB_PROVIDER", "platform"),
            dump_path=_env_value(env, "DUMP_PATH", ".ddev/.downloads/db.sql.gz"),
            cache_bin=_env_value(env, "CACHE_BIN", "discovery"),
        )

    @property
    def dump_file(self) -> Path:
        """Absolute location of the downloaded database dump."""

        return self.project_root / self.dump_path

    def stack_command(self, *args: str) -> List[str]:
        return [*self.stack, *args]

    def drush_command(self, *args: str) -> List[str]:
        return self.stack_command("drush", *args)

    def git_command(self, *args: str) -> List[str]:
        return [*self.git, *args]
