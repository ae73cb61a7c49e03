"""Command line application entry point for seqn-timing."""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, Mapping, Optional, Sequence

from seqn_timing.logging.config import setup_logging

from .errors import CliError, log_cli_error
from .io import load_cli_config
from .parser import add_global_arguments, build_parser

_LOGGING_DEFAULTS: Mapping[str, str] = {
    "level": "warning",
    "output": "stderr",
    "format": "json",
}


def _resolve_logging_config(
    config: Mapping[str, Any], preliminary: argparse.Namespace
) -> Dict[str, Any]:
    logging_cfg_raw = config.get("logging", {})
    logging_cfg = dict(logging_cfg_raw) if isinstance(logging_cfg_raw, Mapping) else {}
    for key in ("level", "output", "format"):
        override = getattr(preliminary, f"log_{key}", None)
        if override is not None:
            logging_cfg[key] = override
        logging_cfg.setdefault(key, _LOGGING_DEFAULTS[key])
    return logging_cfg


def run_cli(args: Optional[Sequence[str]] = None) -> str:
    """Execute the seqn-timing command line interface."""

    config_parser = argparse.ArgumentParser(add_help=False)
    add_global_arguments(config_parser, logging_cfg={})
    preliminary, _ = config_parser.parse_known_args(args)

    try:
        config = load_cli_config(preliminary.config_path)
    except CliError as exc:
        # Logging is not configured yet, so report straight to stderr.
        sys.stderr.write(f"seqn-timing: {exc}\n")
        raise SystemExit(exc.status_code) from exc
    logging_cfg = _resolve_logging_config(config, preliminary)
    config["logging"] = logging_cfg
    try:
        setup_logging(config)
    except ValueError as exc:
        sys.stderr.write(f"seqn-timing: {exc}\n")
        raise SystemExit(2) from exc

    parser = build_parser(config)
    namespace = parser.parse_args(args)
    namespace.config = config

    handler = getattr(namespace, "handler", None)
    if handler is None:
        raise CliError(
            f"Unknown command '{getattr(namespace, 'command', None)}'.",
            category="usage",
            context={"command": getattr(namespace, "command", None)},
        )

    try:
        result = handler(namespace, config=config)
    except CliError as exc:
        if not exc.logged:
            log_cli_error(exc.payload, exc_info=exc)
            exc.logged = True
        message = exc.payload.message
        if message:
            sys.stdout.write(message)
            if not message.endswith("\n"):
                sys.stdout.write("\n")
        raise SystemExit(exc.status_code) from exc
    if result:
        sys.stdout.write(result)
        if not result.endswith("\n"):
            sys.stdout.write("\n")
    return result


def main() -> None:  # pragma: no cover - thin wrapper
    run_cli()


if __name__ == "__main__":  # pragma: no cover - CLI invocation guard
    main()
