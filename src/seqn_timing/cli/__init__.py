"""Command line utilities for seqn-timing."""

from seqn_timing.cli.app import main, run_cli

__all__ = ["main", "run_cli"]
