"""Convenience re-exports for test helpers."""

from __future__ import annotations

from .sequences import (
    action,
    build_variant,
    move,
    sequence_table_payload,
    signal,
    trigger,
    variant_payload,
    write_sequence_table,
)

__all__ = [
    "action",
    "build_variant",
    "move",
    "sequence_table_payload",
    "signal",
    "trigger",
    "variant_payload",
    "write_sequence_table",
]
