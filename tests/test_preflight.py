from dataclasses import dataclass, field, replace
from typing import List, Optional

from stack_refresh.config import Config, Toolchain
from stack_refresh.environment import Environment
from stack_refresh.errors import EnvironmentMismatchError, UsageError, UserDeclined
from stack_refresh.preflight import (
    DRIFT_PROMPT,
    IMPORT_PROMPT,
    confirm_destructive_steps,
    validate_config,
)


@dataclass(frozen=True)
class FakeEnvironment(Environment):
    dump: bool = False
    drift: Optional[str] = None
    drift_fails: bool = False
    queries: List[str] = field(default_factory=list)

    def has_existing_dump(self) -> bool:
        self.queries.append("dump")
        return self.dump

    def config_drift(self) -> Optional[str]:
        self.queries.append("drift")
        if self.drift_fails:
            raise EnvironmentMismatchError("unable to inspect configuration status")
        return self.drift


def _env(**kwargs) -> FakeEnvironment:
    return FakeEnvironment(Toolchain(), **kwargs)


def _recording_input(*answers: str):
    asked = []
    remaining = list(answers)

    def fake_input(text: str) -> str:
        asked.append(text)
        return remaining.pop(0)

    return fake_input, asked


def _no_input(text: str) -> str:
    raise AssertionError(f"unexpected prompt: {text}")


def test_existing_sql_without_import_db_always_fails():
    others = [
        {},
        {"skip_prompts": True},
        {"branch": "main", "skip_update": True},
        {"skip_git_pull": True, "skip_restart": True, "skip_login": True},
        {"verbosity": 3, "dry_run": True},
    ]
    for extra in others:
        config = replace(Config(use_existing_sql=True), **extra)
        try:
            validate_config(config, _env(dump=True))
        except UsageError as exc:
            assert "--existing-sql requires --import-db" in str(exc)
        else:
            raise AssertionError(f"expected UsageError for {extra}")


def test_existing_sql_requires_dump_file():
    config = Config(import_db=True, use_existing_sql=True)

    try:
        validate_config(config, _env(dump=False))
    except UsageError as exc:
        assert "previously downloaded dump" in str(exc)
    else:
        raise AssertionError("expected UsageError to be raised")

    validate_config(config, _env(dump=True))


def test_dump_presence_is_checked_on_disk(tmp_path):
    toolchain = Toolchain(project_root=tmp_path, dump_path="dumps/db.sql.gz")
    environment = Environment(toolchain)
    config = Config(import_db=True, use_existing_sql=True)

    try:
        validate_config(config, environment)
    except UsageError as exc:
        assert str(tmp_path / "dumps" / "db.sql.gz") in str(exc)
    else:
        raise AssertionError("expected UsageError to be raised")

    (tmp_path / "dumps").mkdir()
    (tmp_path / "dumps" / "db.sql.gz").write_bytes(b"")
    validate_config(config, environment)


def test_import_without_existing_sql_does_not_need_dump():
    environment = _env(dump=False)

    validate_config(Config(import_db=True), environment)

    assert environment.queries == []


def test_no_drift_means_no_prompt():
    environment = _env(drift=None)

    confirm_destructive_steps(Config(), environment, input_func=_no_input)

    assert environment.queries == ["drift"]


def test_drift_is_shown_and_confirmed(capsys):
    fake_input, asked = _recording_input("")
    environment = _env(drift="system.site\nnode.type.page")

    confirm_destructive_steps(Config(), environment, input_func=fake_input)

    assert asked == [f"{DRIFT_PROMPT.question} [Y/n] "]
    out = capsys.readouterr().out
    assert "system.site" in out
    assert "node.type.page" in out


def test_declining_drift_aborts_with_guidance():
    fake_input, _ = _recording_input("n")

    try:
        confirm_destructive_steps(Config(), _env(drift="system.site"), input_func=fake_input)
    except UserDeclined as exc:
        assert exc.guidance == DRIFT_PROMPT.fallback_guidance
    else:
        raise AssertionError("expected UserDeclined to be raised")


def test_drift_inspection_failure_is_usage_error():
    try:
        confirm_destructive_steps(Config(), _env(drift_fails=True), input_func=_no_input)
    except UsageError as exc:
        assert isinstance(exc, EnvironmentMismatchError)
        assert exc.exit_code == 2
    else:
        raise AssertionError("expected EnvironmentMismatchError to be raised")


def test_drift_is_not_checked_when_updates_skipped_or_db_imported():
    for config in (Config(skip_update=True), Config(import_db=True, skip_prompts=True)):
        environment = _env(drift="system.site", drift_fails=True)
        confirm_destructive_steps(config, environment, input_func=_no_input)
        assert environment.queries == []


def test_import_db_is_confirmed_once():
    fake_input, asked = _recording_input("y")

    confirm_destructive_steps(Config(import_db=True), _env(), input_func=fake_input)

    assert asked == [f"{IMPORT_PROMPT.question} [Y/n] "]


def test_import_replaces_drift_prompt():
    fake_input, asked = _recording_input("y")
    environment = _env(drift="system.site")

    confirm_destructive_steps(Config(import_db=True), environment, input_func=fake_input)

    assert asked == [f"{IMPORT_PROMPT.question} [Y/n] "]
    assert environment.queries == []


def test_yes_skips_every_prompt():
    config = Config(import_db=True, skip_prompts=True)

    confirm_destructive_steps(config, _env(), input_func=_no_input)
    confirm_destructive_steps(Config(skip_prompts=True), _env(drift="system.site"), input_func=_no_input)


def test_dry_run_asks_nothing():
    environment = _env(drift="system.site")

    confirm_destructive_steps(Config(import_db=True, dry_run=True), environment, input_func=_no_input)

    assert environment.queries == []
