"""
Command-line interface for stack-refresh.

This module turns the raw argument list into a Config and maps the
outcome of the refresh to a process exit status. The accepted flags
are declared once in FLAGS. Combined short flags (-AU) and
--name=value tokens are split before argparse sees them; argparse
matches the flags and lets them interleave with the branch argument.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import List, NoReturn, Optional

from .config import Config
from .errors import RefreshError, UsageError, UserDeclined
from .logging_utils import configure_logging
from .refresh import run_refresh

PROG = "stack-refresh"

# Exit status for Ctrl+C, as a shell reports SIGINT.
INTERRUPTED = 130


@dataclass(frozen=True)
class FlagSpec:
    long: str
    short: str
    dest: str
    help: str
    action: str = "store_true"


FLAGS = (
    FlagSpec(
        "--verbose",
        "-v",
        "verbosity",
        "Increase verbosity (can be specified multiple times).",
        action="count",
    ),
    FlagSpec("--yes", "-y", "skip_prompts", "Answer yes to every confirmation prompt."),
    FlagSpec("--import-db", "-i", "import_db", "Import a fresh database."),
    FlagSpec(
        "--existing-sql",
        "-e",
        "use_existing_sql",
        "Import the previously downloaded dump instead of downloading a new one.",
    ),
    FlagSpec("--no-git-pull", "-G", "skip_git_pull", "Do not pull the branch from its upstream."),
    FlagSpec("--no-restart", "-R", "skip_restart", "Do not restart the development stack."),
    FlagSpec("--no-composer", "-C", "skip_dependency_build", "Do not install composer dependencies."),
    FlagSpec("--no-assets", "-A", "skip_asset_build", "Do not build front-end assets."),
    FlagSpec("--no-update", "-U", "skip_update", "Do not run database updates and configuration import."),
    FlagSpec("--no-login", "-L", "skip_login", "Do not generate a one-time login link."),
    FlagSpec("--dry-run", "-n", "dry_run", "Print the commands that would run without running them."),
)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG,
        description=(
            "Refresh the local development stack: switch branch, install "
            "dependencies, build assets, optionally import a database, run "
            "CMS updates and print a login link."
        ),
        allow_abbrev=False,
    )

    parser.add_argument(
        "branch",
        nargs="?",
        help="Branch to check out before refreshing (default: stay on the current branch).",
    )
    for flag in FLAGS:
        extra = {"default": 0} if flag.action == "count" else {}
        parser.add_argument(
            flag.short,
            flag.long,
            dest=flag.dest,
            action=flag.action,
            help=flag.help,
            **extra,
        )

    return parser


def normalize_tokens(tokens: List[str]) -> List[str]:
    """
    Split "--name=value" into "--name value" and "-abc" into "-a -b -c".

    No flag takes a value, so a split-off value is read as the branch.
    Expanding combined short flags here lets an unknown letter be
    reported on its own.
    """

    normalized: List[str] = []
    for token in tokens:
        if token.startswith("--") and "=" in token[3:]:
            name, value = token.split("=", 1)
            normalized.extend([name, value])
        elif token.startswith("-") and not token.startswith("--") and len(token) > 2:
            normalized.extend(f"-{letter}" for letter in token[1:])
        else:
            normalized.append(token)
    return normalized


def parse_config(
    argv: Optional[List[str]] = None,
    parser: Optional[argparse.ArgumentParser] = None,
) -> Config:
    """
    Parse command-line arguments into a Config.

    Everything after a literal "--" is positional and left untouched by
    normalize_tokens. At most one positional (the branch) is accepted.
    """

    if argv is None:
        argv = sys.argv[1:]
    if parser is None:
        parser = build_arg_parser()

    args_list = list(argv)
    trailing: List[str] = []
    if "--" in args_list:
        split_at = args_list.index("--")
        args_list, trailing = args_list[:split_at], args_list[split_at + 1 :]

    args, extras = parser.parse_known_args(normalize_tokens(args_list))

    for token in extras:
        if token.startswith("-") and token != "-":
            raise UsageError(f"Unknown option: {token}")

    positionals = ([args.branch] if args.branch is not None else []) + extras + trailing
    if len(positionals) > 1:
        raise UsageError(
            f"expected at most one branch argument, got {len(positionals)}: "
            + " ".join(positionals)
        )

    branch = positionals[0] if positionals else None
    if branch is not None and not branch.strip():
        raise UsageError("branch name must not be empty")

    return Config(branch=branch, **{flag.dest: getattr(args, flag.dest) for flag in FLAGS})


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()

    try:
        config = parse_config(argv, parser)
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        print(f"{PROG}: error: {exc}", file=sys.stderr)
        return exc.exit_code

    configure_logging(verbosity=config.verbosity)

    try:
        run_refresh(config)
    except KeyboardInterrupt:
        return INTERRUPTED
    except UserDeclined as exc:
        if exc.guidance:
            print(exc.guidance)
        return exc.exit_code
    except RefreshError as exc:
        print(f"{PROG}: error: {exc}", file=sys.stderr)
        return exc.exit_code

    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
