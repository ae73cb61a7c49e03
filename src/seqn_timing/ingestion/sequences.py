"""Loading decoded sequence tables and resolving animation variants.

The tools consume sequence tables that were already decoded from the game
asset into JSON or TOML documents::

    {"sequences": [
        {"sequence": 12, "animation_data": [
            {"token": 0, "flags": 0,
             "steps": [{"type": 0, "duration": 100, "flags": 16}],
             "triggers": [{"trigger": 3, "flags": 0, "time": 50}]}
        ]}
    ]}

``type`` selects the step kind (``0`` action, ``1`` move) and ``trigger`` the
trigger kind; ``kind`` is accepted as an alias for both.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping as ABCMapping
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from seqn_core.models import (
    InvalidSequenceError,
    Sequence,
    SequenceTable,
    Step,
    Trigger,
    Variant,
    make_step,
)
from seqn_timing.configuration import load_toml_mapping

__all__ = [
    "SequenceTableError",
    "find_variant",
    "parse_sequence_table",
    "read_sequence_table",
]

logger = logging.getLogger(__name__)


class SequenceTableError(ValueError):
    """Raised when a sequence table document cannot be decoded."""


def _require_int(payload: Mapping[str, Any], *keys: str, default: Optional[int] = None, where: str) -> int:
    for key in keys:
        if key in payload:
            value = payload[key]
            if isinstance(value, bool) or not isinstance(value, int):
                raise SequenceTableError(
                    f"{where}: field '{key}' must be an integer, got {value!r}"
                )
            return value
    if default is not None:
        return default
    raise SequenceTableError(f"{where}: missing field '{keys[0]}'")


def _iter_mappings(payload: Any, *, where: str) -> Iterable[Mapping[str, Any]]:
    if payload is None:
        return ()
    if not isinstance(payload, list):
        raise SequenceTableError(f"{where}: expected a list, got {type(payload).__name__}")
    for index, item in enumerate(payload):
        if not isinstance(item, ABCMapping):
            raise SequenceTableError(f"{where}[{index}]: expected a table")
    return payload


def _parse_step(payload: Mapping[str, Any], *, where: str) -> Step:
    kind = _require_int(payload, "type", "kind", where=where)
    duration = _require_int(payload, "duration", where=where)
    flags = _require_int(payload, "flags", default=0, where=where)
    try:
        return make_step(kind, duration, flags)
    except ValueError as exc:
        raise SequenceTableError(f"{where}: {exc}") from exc


def _parse_trigger(payload: Mapping[str, Any], *, where: str) -> Trigger:
    return Trigger(
        kind=_require_int(payload, "trigger", "kind", where=where),
        flags=_require_int(payload, "flags", default=0, where=where),
        time=_require_int(payload, "time", where=where),
    )


def _parse_variant(payload: Mapping[str, Any], *, where: str) -> Variant:
    steps: List[Step] = [
        _parse_step(item, where=f"{where}.steps[{index}]")
        for index, item in enumerate(_iter_mappings(payload.get("steps"), where=f"{where}.steps"))
    ]
    triggers: List[Trigger] = [
        _parse_trigger(item, where=f"{where}.triggers[{index}]")
        for index, item in enumerate(
            _iter_mappings(payload.get("triggers"), where=f"{where}.triggers")
        )
    ]
    try:
        return Variant(
            token=_require_int(payload, "token", where=where),
            flags=_require_int(payload, "flags", default=0, where=where),
            steps=tuple(steps),
            triggers=tuple(triggers),
        )
    except InvalidSequenceError as exc:
        raise SequenceTableError(f"{where}: {exc}") from exc


def parse_sequence_table(payload: Mapping[str, Any]) -> SequenceTable:
    """Build a :class:`SequenceTable` from a decoded document."""

    if not isinstance(payload, ABCMapping):
        raise SequenceTableError("Sequence table document must be a mapping")
    sequences: List[Sequence] = []
    for index, item in enumerate(_iter_mappings(payload.get("sequences"), where="sequences")):
        where = f"sequences[{index}]"
        variants = [
            _parse_variant(entry, where=f"{where}.animation_data[{position}]")
            for position, entry in enumerate(
                _iter_mappings(item.get("animation_data"), where=f"{where}.animation_data")
            )
        ]
        sequences.append(
            Sequence(
                animation_id=_require_int(item, "sequence", "animation", where=where),
                variants=tuple(variants),
            )
        )
    return SequenceTable.from_sequences(sequences)


def read_sequence_table(path: Path | str) -> SequenceTable:
    """Read a JSON or TOML sequence table from ``path``."""

    source = Path(path)
    suffix = source.suffix.lower()
    if suffix == ".json":
        with source.open("r", encoding="utf8") as handle:
            try:
                payload = json.load(handle)
            except ValueError as exc:
                # JSONDecodeError and UnicodeDecodeError both derive from ValueError.
                raise SequenceTableError(f"{source}: invalid JSON ({exc})") from exc
    elif suffix == ".toml":
        if not source.exists():
            raise FileNotFoundError(source)
        try:
            payload = load_toml_mapping(source)
        except ValueError as exc:
            raise SequenceTableError(f"{source}: invalid TOML ({exc})") from exc
    else:
        raise SequenceTableError(f"Unsupported sequence table format: {source}")

    table = parse_sequence_table(payload)
    logger.debug(
        "Loaded sequence table",
        extra={"event": "ingestion.sequence_table", "path": str(source), "sequences": len(table)},
    )
    return table


def find_variant(table: SequenceTable, animation_id: int, token: int) -> Optional[Variant]:
    """Return the requested variant or ``None`` when either lookup misses."""

    sequence = table.find_sequence(animation_id)
    if sequence is None:
        logger.debug(
            "Animation not found",
            extra={"event": "ingestion.lookup_miss", "animation": animation_id},
        )
        return None
    variant = sequence.find_variant(token)
    if variant is None:
        logger.debug(
            "Variant not found",
            extra={
                "event": "ingestion.lookup_miss",
                "animation": animation_id,
                "variant": token,
            },
        )
    return variant
