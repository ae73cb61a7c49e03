from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from textwrap import dedent

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from seqn_core.models import StepFlags, Variant  # noqa: E402
from seqn_timing.cli import run_cli  # noqa: E402

from tests.helpers import action, build_variant, signal, trigger, write_sequence_table  # noqa: E402


def write_pyproject(directory: Path, contents: str) -> Path:
    """Persist a ``pyproject.toml`` under ``directory`` and return its path."""

    payload = dedent(contents).lstrip()
    target = directory / "pyproject.toml"
    target.write_text(payload, encoding="utf8")
    return target


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep the developer's configuration and logging handlers out of the tests."""

    monkeypatch.delenv("SEQN_TIMING_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def looped_variant() -> Variant:
    """Variant with one pre-loop step, a two step loop body and one post-loop step."""

    return build_variant(
        [
            action(50),
            action(50, StepFlags.LOOP_BEGIN),
            action(50, StepFlags.LOOP_END),
            action(50),
        ],
        [signal(120)],
        token=0,
        flags=7,
    )


@pytest.fixture
def sequence_table_path(tmp_path: Path, looped_variant: Variant) -> Path:
    """JSON sequence table with a looped animation, a plain one and a broken one."""

    plain = build_variant(
        [action(100), action(100, StepFlags.EVADE_HOP), action(100)],
        [trigger(1, 50), signal(250)],
        token=2,
    )
    broken = build_variant(
        [action(10, StepFlags.LOOP_END), action(10), action(10, StepFlags.LOOP_BEGIN)],
        token=0,
    )
    return write_sequence_table(
        tmp_path / "sequences.json",
        {12: [looped_variant, plain], 40: [broken]},
    )


@dataclass(slots=True)
class CliRunResult:
    """Normalized representation of a CLI invocation."""

    exit_code: int
    stdout: str
    stderr: str
    result: str | None
    exception: BaseException | None
    cause: BaseException | None


@pytest.fixture
def cli_runner(capsys: pytest.CaptureFixture[str]):
    """Execute CLI commands while capturing output and exit status."""

    def _run(args: Sequence[object]) -> CliRunResult:
        invocation = [str(arg) for arg in args]
        exit_code = 0
        result: str | None = None
        exception: SystemExit | None = None

        try:
            result = run_cli(invocation)
        except SystemExit as exc:  # pragma: no branch - normalized handling
            exit_code = exc.code if isinstance(exc.code, int) else 1
            exception = exc
        captured = capsys.readouterr()
        cause: BaseException | None = exception.__cause__ if exception else None
        return CliRunResult(
            exit_code=exit_code,
            stdout=captured.out,
            stderr=captured.err,
            result=result,
            exception=exception,
            cause=cause,
        )

    return _run
