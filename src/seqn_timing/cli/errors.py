"""Error helpers for the seqn-timing command line tools."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

__all__ = [
    "CliError",
    "ErrorPayload",
    "build_error_payload",
    "log_cli_error",
]


CATEGORY_STATUS_CODES: Mapping[str, int] = {
    "runtime": 1,
    "usage": 2,
    "io": 3,
    "not_found": 4,
    "invalid_data": 5,
}

_DEFAULT_CATEGORY = "runtime"
_DEFAULT_LOGGER_NAME = "seqn_timing.cli"


@dataclass(frozen=True, slots=True)
class ErrorPayload:
    """Structured representation of an error emitted by the CLI."""

    status_code: int
    category: str
    message: str
    context: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Mapping[str, Any]:
        return {
            "status_code": self.status_code,
            "category": self.category,
            "message": self.message,
            "context": dict(self.context),
        }


def _scalar_context(context: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    # Paths and other objects are stringified so the JSON formatter can emit them.
    return {
        key: value if isinstance(value, (str, int, float, bool)) or value is None else str(value)
        for key, value in (context or {}).items()
    }


def build_error_payload(
    message: str,
    *,
    category: str = _DEFAULT_CATEGORY,
    status_code: Optional[int] = None,
    context: Optional[Mapping[str, Any]] = None,
) -> ErrorPayload:
    """Create a :class:`ErrorPayload` describing a CLI failure."""

    resolved_category = category if category in CATEGORY_STATUS_CODES else _DEFAULT_CATEGORY
    if status_code is None:
        status_code = CATEGORY_STATUS_CODES[resolved_category]
    return ErrorPayload(
        status_code=status_code,
        category=resolved_category,
        message=message,
        context=_scalar_context(context),
    )


def log_cli_error(
    payload: ErrorPayload,
    *,
    logger: Optional[logging.Logger] = None,
    exc_info: Optional[BaseException] = None,
) -> None:
    """Emit ``payload`` through ``logger.error`` with structured context."""

    target = logger or logging.getLogger(_DEFAULT_LOGGER_NAME)
    target.error(
        payload.message,
        extra={
            "event": "cli.error",
            "category": payload.category,
            "status_code": payload.status_code,
            "context": dict(payload.context),
        },
        exc_info=exc_info,
    )


class CliError(RuntimeError):
    """Error raised by command handlers and turned into an exit status."""

    def __init__(
        self,
        message: str,
        *,
        category: str = _DEFAULT_CATEGORY,
        status_code: Optional[int] = None,
        context: Optional[Mapping[str, Any]] = None,
        logged: bool = False,
    ) -> None:
        super().__init__(message)
        self.payload = build_error_payload(
            message,
            category=category,
            status_code=status_code,
            context=context,
        )
        self.logged = logged

    @property
    def category(self) -> str:
        return self.payload.category

    @property
    def status_code(self) -> int:
        return self.payload.status_code

    @property
    def context(self) -> Mapping[str, Any]:
        return self.payload.context

    @classmethod
    def from_context(
        cls,
        message: str,
        *,
        category: str = _DEFAULT_CATEGORY,
        context: Optional[Mapping[str, Any]] = None,
        logger: Optional[logging.Logger] = None,
        cause: Optional[BaseException] = None,
    ) -> "CliError":
        """Build the error and log it immediately, e.g. to attach ``cause``."""

        error = cls(message, category=category, context=context, logged=True)
        log_cli_error(error.payload, logger=logger, exc_info=cause)
        return error
