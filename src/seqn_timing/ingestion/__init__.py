"""Sequence table ingestion helpers."""

from seqn_timing.ingestion.sequences import (
    SequenceTableError,
    find_variant,
    parse_sequence_table,
    read_sequence_table,
)

__all__ = [
    "SequenceTableError",
    "find_variant",
    "parse_sequence_table",
    "read_sequence_table",
]
