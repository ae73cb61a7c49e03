"""Configuration and asset loading helpers for the seqn-timing CLI."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from seqn_core.models import SequenceTable
from seqn_timing.cli.errors import CliError
from seqn_timing.configuration import load_project_config
from seqn_timing.ingestion import SequenceTableError, read_sequence_table

CONFIG_ENV_VAR = "SEQN_TIMING_CONFIG"
PROJECT_CONFIG_FILENAME = "pyproject.toml"

__all__ = ["CONFIG_ENV_VAR", "load_cli_config", "load_sequence_table"]


def _iter_unique_paths(candidates: List[Path]) -> List[Path]:
    seen: Dict[Path, None] = {}
    ordered: List[Path] = []
    for candidate in candidates:
        resolved = candidate.expanduser().resolve(strict=False)
        if resolved in seen:
            continue
        seen[resolved] = None
        ordered.append(resolved)
    return ordered


def _pyproject_candidates(base: Path) -> List[Path]:
    base = base.expanduser()
    if base.name == PROJECT_CONFIG_FILENAME:
        return [base]
    if base.suffix:
        return []
    return [base / PROJECT_CONFIG_FILENAME]


def load_cli_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load CLI defaults from ``pyproject.toml`` files.

    The explicit ``path`` wins over ``$SEQN_TIMING_CONFIG``, which wins over
    the ``pyproject.toml`` of the current directory.
    """

    env_config = os.environ.get(CONFIG_ENV_VAR)
    bases: List[Path] = []
    if path is not None:
        bases.append(path)
    if env_config:
        bases.append(Path(env_config))
    bases.append(Path.cwd())

    candidates: List[Path] = []
    for base in bases:
        candidates.extend(_pyproject_candidates(base))

    for candidate in _iter_unique_paths(candidates):
        try:
            loaded = load_project_config(candidate)
        except ValueError as exc:
            raise CliError(
                f"Invalid configuration file {candidate}: {exc}",
                category="usage",
                context={"path": str(candidate)},
            ) from exc
        if not loaded:
            continue
        payload, resolved = loaded
        payload["_config_path"] = str(resolved)
        return payload

    return {"_config_path": None}


def load_sequence_table(source: Path) -> SequenceTable:
    """Read ``source`` translating failures into :class:`CliError`."""

    if not source.exists():
        raise CliError(
            f"Sequence table {source} does not exist",
            category="not_found",
            context={"path": str(source)},
        )
    try:
        return read_sequence_table(source)
    except SequenceTableError as exc:
        raise CliError(
            str(exc),
            category="invalid_data",
            context={"path": str(source)},
        ) from exc
    except OSError as exc:
        raise CliError.from_context(
            f"Unable to read sequence table {source}: {exc}",
            category="io",
            context={"path": str(source)},
            cause=exc,
        ) from exc
