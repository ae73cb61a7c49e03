"""Top-level package for seqn-timing.

The package loads decoded animation sequence tables, resolves a single
animation variant and reports its loop, evade and execute timings through
:mod:`seqn_core`.
"""

from ._version import __version__
from .configuration import load_project_config
from .exporters import exporters_registry
from .ingestion import (
    SequenceTableError,
    find_variant,
    parse_sequence_table,
    read_sequence_table,
)

__all__ = [
    "SequenceTableError",
    "exporters_registry",
    "find_variant",
    "load_project_config",
    "parse_sequence_table",
    "read_sequence_table",
    "__version__",
]
