"""Helpers shared by the seqn-timing sub-commands."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from seqn_core.evaluation import TIME_UNITS
from seqn_timing.cli.errors import CliError
from seqn_timing.exporters import exporters_registry

__all__ = [
    "DEFAULT_ASSET",
    "add_export_argument",
    "add_selection_arguments",
    "non_negative_int",
    "render_payload",
    "resolve_asset_path",
    "resolve_exports",
    "validated_export",
    "validated_unit",
]

DEFAULT_ASSET = Path("sequences.json")


def non_negative_int(raw: str) -> int:
    """``argparse`` type accepting base 10 integers greater than or equal to zero.

    Leading zeros are allowed, so ``010`` reads as ten.
    """

    try:
        value = int(raw, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: {raw!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"value must be non-negative: {raw!r}")
    return value


def validated_export(value: Any, *, fallback: str) -> str:
    """Return ``value`` when it matches a registered exporter, else ``fallback``."""

    if isinstance(value, str) and value in exporters_registry:
        return value
    return fallback


def validated_unit(value: Any, *, fallback: str = "ticks") -> str:
    if isinstance(value, str) and value.strip().lower() in TIME_UNITS:
        return value.strip().lower()
    return fallback


def add_export_argument(
    parser: argparse.ArgumentParser, *, default: str, help_text: str
) -> None:
    """Register the ``--export`` flag on ``parser`` with standard semantics."""

    parser.add_argument(
        "--export",
        dest="exports",
        choices=sorted(exporters_registry.keys()),
        action="append",
        help=f"{help_text} Repeat the flag to combine exporters.",
    )
    parser.set_defaults(exports=None, export_default=default)


def add_selection_arguments(
    parser: argparse.ArgumentParser, *, config: Mapping[str, Any]
) -> None:
    """Register the animation/variant positionals and the asset/unit options."""

    parser.add_argument(
        "animation",
        type=non_negative_int,
        help="Numeric id of the animation to look up.",
    )
    parser.add_argument(
        "variant",
        type=non_negative_int,
        nargs="?",
        default=0,
        help="Variant token inside the animation (default: 0).",
    )
    parser.add_argument(
        "--asset",
        type=Path,
        default=None,
        help=(
            "Decoded sequence table (.json or .toml). Defaults to the 'asset' key "
            f"of [tool.seqn_timing] or {DEFAULT_ASSET}."
        ),
    )
    parser.add_argument(
        "--unit",
        choices=sorted(TIME_UNITS),
        default=validated_unit(config.get("unit")),
        help="Unit of the reported times (default: ticks).",
    )


def resolve_asset_path(
    namespace: Optional[argparse.Namespace], config: Mapping[str, Any]
) -> Path:
    """Pick the sequence table from the command line, the config or the default."""

    if namespace is not None:
        raw = getattr(namespace, "asset", None)
        if raw:
            return Path(raw).expanduser()
    configured = config.get("asset")
    if isinstance(configured, str) and configured:
        return Path(configured).expanduser()
    return DEFAULT_ASSET


def _unique_export_list(values: Sequence[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


def resolve_exports(namespace: argparse.Namespace) -> List[str]:
    """Return the exporters requested by ``namespace`` or raise :class:`CliError`."""

    exports = getattr(namespace, "exports", None)
    if exports:
        return _unique_export_list(exports)
    default = getattr(namespace, "export_default", None)
    if isinstance(default, str):
        return [default]
    raise CliError("No exporter configured for this command.", category="usage")


def render_payload(payload: Mapping[str, Any], exporters: Sequence[str] | str) -> str:
    """Render ``payload`` using the exporters specified in ``exporters``."""

    if isinstance(exporters, str):
        selected = [exporters]
    else:
        selected = _unique_export_list(exporters)

    rendered_outputs: List[str] = []
    for exporter_name in selected:
        try:
            exporter = exporters_registry[exporter_name]
        except KeyError:
            raise CliError(
                f"Unknown exporter '{exporter_name}'.",
                category="usage",
                context={"exporter": exporter_name},
            ) from None
        rendered_outputs.append(exporter(dict(payload)))

    return "\n\n".join(rendered_outputs)
