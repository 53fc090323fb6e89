"""Error helpers for the setup-delta command line."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..ingestion.loader import SetupLoadError

__all__ = [
    "CliError",
    "ErrorPayload",
    "build_error_payload",
    "error_from_load_failure",
    "log_cli_error",
]


STATUS_CODES: Mapping[str, int] = {
    "runtime": 1,
    "usage": 2,
    "io": 3,
    "not_found": 4,
}

_DEFAULT_CATEGORY = "runtime"
_LOGGER_NAME = "setup_delta.cli"


@dataclass(frozen=True, slots=True)
class ErrorPayload:
    """What went wrong, how to classify it and which exit status to use."""

    status_code: int
    category: str
    message: str
    context: Mapping[str, Any]

    def as_dict(self) -> Mapping[str, Any]:
        return {
            "status_code": self.status_code,
            "category": self.category,
            "message": self.message,
            "context": dict(self.context),
        }


def _scalar_context(context: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    # Non-scalar values are stringified so payloads stay JSON friendly.
    return {
        str(key): value if isinstance(value, (str, int, float, bool)) or value is None else str(value)
        for key, value in (context or {}).items()
    }


def build_error_payload(
    message: str,
    *,
    category: str = _DEFAULT_CATEGORY,
    status_code: Optional[int] = None,
    context: Optional[Mapping[str, Any]] = None,
) -> ErrorPayload:
    """Create an :class:`ErrorPayload`, deriving the status from ``category``."""

    category = category or _DEFAULT_CATEGORY
    if status_code is None:
        status_code = STATUS_CODES.get(category, STATUS_CODES[_DEFAULT_CATEGORY])
    return ErrorPayload(
        status_code=status_code,
        category=category,
        message=message,
        context=_scalar_context(context),
    )


def log_cli_error(
    payload: ErrorPayload,
    *,
    logger: Optional[logging.Logger] = None,
    exc_info: Optional[BaseException] = None,
) -> None:
    """Log ``payload`` at error level with its category and context attached."""

    (logger or logging.getLogger(_LOGGER_NAME)).error(
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
    """Failure surfaced to the user with a message and an exit status."""

    def __init__(
        self,
        message: str,
        *,
        category: str = _DEFAULT_CATEGORY,
        status_code: Optional[int] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.payload = build_error_payload(
            message,
            category=category,
            status_code=status_code,
            context=context,
        )
        self.logged = False

    @property
    def category(self) -> str:
        return self.payload.category

    @property
    def status_code(self) -> int:
        return self.payload.status_code

    @property
    def context(self) -> Mapping[str, Any]:
        return self.payload.context


def error_from_load_failure(exc: SetupLoadError) -> CliError:
    """Translate a loader failure into a :class:`CliError`.

    Missing files map to ``not_found``; every other read or decode failure
    is an ``io`` error.
    """

    category = "not_found" if isinstance(exc.__cause__, FileNotFoundError) else "io"
    return CliError(str(exc), category=category, context={"path": exc.path})
