"""Argument parsing helpers for the seqn-timing CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Mapping, Optional

from seqn_timing._version import __version__

from . import sweep as sweep_command
from . import timeline as timeline_command

LOG_FORMATS = ("json", "text")


def add_global_arguments(
    parser: argparse.ArgumentParser, *, logging_cfg: Mapping[str, Any]
) -> None:
    """Register ``--config`` and the logging flags on ``parser``."""

    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to the pyproject.toml holding a [tool.seqn_timing] section.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=logging_cfg.get("level"),
        help="Logging level (e.g. debug, info, warning; default: warning).",
    )
    parser.add_argument(
        "--log-output",
        dest="log_output",
        default=logging_cfg.get("output"),
        help="Logging destination (stdout, stderr or a file path; default: stderr).",
    )
    parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=LOG_FORMATS,
        default=logging_cfg.get("format"),
        help="Logging formatter (json or text; default: json).",
    )


def build_parser(config: Optional[Mapping[str, Any]] = None) -> argparse.ArgumentParser:
    config = dict(config or {})
    logging_cfg_raw = config.get("logging", {})
    logging_cfg = dict(logging_cfg_raw) if isinstance(logging_cfg_raw, Mapping) else {}

    parser = argparse.ArgumentParser(
        prog="seqn-timing",
        description="seqn-timing – loop, evade and execute timings of animation sequences",
    )
    add_global_arguments(parser, logging_cfg=logging_cfg)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)
    timeline_command.register_subparser(subparsers, config=config)
    sweep_command.register_subparser(subparsers, config=config)
    return parser


__all__ = ["LOG_FORMATS", "add_global_arguments", "build_parser"]
