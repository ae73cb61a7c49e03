"""Package version lookup.

Sources are tried in order: the ``SEQN_TIMING_VERSION`` override, the
installed distribution metadata and finally the ``[project]`` table of the
source checkout's ``pyproject.toml``.  Whatever wins must be a plain
``MAJOR.MINOR.PATCH`` release.
"""

from __future__ import annotations

import os
from importlib import metadata
from pathlib import Path
from typing import Callable, Optional, Tuple

from packaging.version import InvalidVersion, Version

from .configuration import load_toml_mapping

DISTRIBUTION = "seqn-timing"
OVERRIDE_ENV_VAR = "SEQN_TIMING_VERSION"

_CHECKOUT_ROOT = Path(__file__).resolve().parents[2]


def _from_environment() -> Optional[str]:
    return os.environ.get(OVERRIDE_ENV_VAR) or None


def _from_metadata() -> Optional[str]:
    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return None


def _from_checkout(root: Path = _CHECKOUT_ROOT) -> Optional[str]:
    payload = load_toml_mapping(root / "pyproject.toml") or {}
    project = payload.get("project")
    if isinstance(project, dict) and project.get("name") == DISTRIBUTION:
        version = project.get("version")
        return str(version) if version else None
    return None


_SOURCES: Tuple[Callable[[], Optional[str]], ...] = (
    _from_environment,
    _from_metadata,
    _from_checkout,
)


def parse_release(raw: str) -> Tuple[int, int, int]:
    """Return the ``(major, minor, patch)`` triple of ``raw``.

    Raises :class:`RuntimeError` for anything that is not a three part
    release, pre-release and local segments included.
    """

    try:
        parsed = Version(raw)
    except InvalidVersion as exc:
        raise RuntimeError(f"Invalid {DISTRIBUTION} version {raw!r}") from exc
    if len(parsed.release) != 3 or parsed.pre or parsed.dev or parsed.local:
        raise RuntimeError(
            f"{DISTRIBUTION} versions must look like MAJOR.MINOR.PATCH, got {raw!r}"
        )
    major, minor, patch = parsed.release
    return major, minor, patch


def resolve_version() -> str:
    for source in _SOURCES:
        raw = source()
        if raw:
            parse_release(raw)
            return raw
    raise RuntimeError(f"Unable to determine the {DISTRIBUTION} version")


__version__ = resolve_version()
VERSION_INFO = parse_release(__version__)

__all__ = ["VERSION_INFO", "__version__", "parse_release", "resolve_version"]
