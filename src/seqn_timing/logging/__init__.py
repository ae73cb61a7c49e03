"""Logging utilities for seqn-timing."""

from seqn_timing.logging.config import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
