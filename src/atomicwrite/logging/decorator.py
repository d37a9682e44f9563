# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Method-level audit logging for staged writers."""

import functools
import inspect
import logging
from collections.abc import Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

from atomicwrite.logging.event_log import EventLog

_log = logging.getLogger(__name__)


@runtime_checkable
class Loggable(Protocol):
    """Instance with an optional event log. Used by @log_method."""

    _log: EventLog | None
    _log_context: dict[str, str]


def _build_args_dict(
    fn: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> dict[str, Any]:
    """Map positional + keyword args to parameter names, skipping self."""
    sig = inspect.signature(fn)
    # None stands in for self (already stripped from args by the wrapper).
    bound = sig.bind(None, *args, **kwargs)
    bound.arguments.pop("self", None)
    return {k: _serialize_result(v) for k, v in bound.arguments.items()}


def _emit(instance: Loggable, event: str, data: dict[str, Any]) -> None:
    """Best-effort append. An audit failure never fails the write."""
    log = instance._log
    if log is None:
        return
    try:
        log.log(event, data, context=instance._log_context)
    except (OSError, RuntimeError) as exc:
        _log.warning("could not record %s event: %s", event, exc)


def record_error(
    instance: Loggable, event: str, exc: BaseException, data: dict[str, Any] | None = None
) -> None:
    """Record `<event>.error` for `exc`. No-op without an event log."""
    if instance._log is None:
        return
    error_data: dict[str, Any] = {
        **(data or {}),
        "error": type(exc).__name__,
        "message": str(exc),
    }
    _emit(instance, f"{event}.error", error_data)


_F = TypeVar("_F", bound=Callable[..., Any])


def log_method(
    *,
    before: bool = False,
    after: bool = False,
) -> Callable[[_F], _F]:
    """Log method calls to the instance's EventLog.

    Expects the instance to have `_log: EventLog | None` and
    `_log_context`. If _log is None, the method runs without logging.
    With after=True, a raised exception is recorded as `<name>.error`
    and then re-raised unchanged.
    """

    def decorator(fn: _F) -> _F:
        event_name = fn.__name__

        @functools.wraps(fn)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            logging_on = self._log is not None
            args_dict = _build_args_dict(fn, args, kwargs) if logging_on else {}
            if logging_on and before:
                _emit(self, event_name, args_dict)
            try:
                result = fn(self, *args, **kwargs)
            except Exception as exc:
                if logging_on and after:
                    record_error(self, event_name, exc, args_dict)
                raise
            if logging_on and after:
                result_data: dict[str, Any] = {**args_dict}
                if result is not None:
                    result_data["result"] = _serialize_result(result)
                _emit(self, f"{event_name}.result", result_data)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def _serialize_result(value: Any) -> Any:
    """Best-effort serialization for log entries."""
    if isinstance(value, bytes):
        import base64

        return base64.b64encode(value).decode()
    if isinstance(value, str | int | float | bool | type(None)):
        return value
    return str(value)
