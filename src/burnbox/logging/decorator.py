# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Method-level logging decorator for request handlers."""

import base64
import functools
import inspect
from collections.abc import Callable, Collection
from typing import Any, Protocol, TypeVar, runtime_checkable

from burnbox.logging.event_log import EventLog


@runtime_checkable
class Loggable(Protocol):
    """Instance with an optional event log. Used by @log_method."""

    _log: EventLog | None


def _build_args_dict(
    fn: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> dict[str, Any]:
    """Map positional + keyword args to parameter names, skipping self."""
    sig = inspect.signature(fn)
    # None stands in for self (already stripped from args by the wrapper).
    bound = sig.bind(None, *args, **kwargs)
    bound.arguments.pop("self", None)
    return dict(bound.arguments)


def _redact(data: dict[str, Any], redact: Collection[str]) -> dict[str, Any]:
    """Replace sensitive values with their length."""
    out: dict[str, Any] = {}
    for key, value in data.items():
        if key in redact:
            out[key] = {"redacted": len(value) if value is not None else None}
        else:
            out[key] = _serialize_value(value)
    return out


_F = TypeVar("_F", bound=Callable[..., Any])


def log_method(
    *,
    before: bool = False,
    after: bool = False,
    redact: Collection[str] = (),
) -> Callable[[_F], _F]:
    """Log method calls to the instance's EventLog.

    Expects the instance to have a `_log: EventLog | None` attribute.
    If _log is None, the method runs without logging. Arguments and
    dict-result keys named in *redact* are logged as their length only.
    Nothing is logged after a call that raised.
    """

    def decorator(fn: _F) -> _F:
        event_name = fn.__name__

        @functools.wraps(fn)
        def wrapper(self: Loggable, *args: Any, **kwargs: Any) -> Any:
            log: EventLog | None = self._log
            args_dict = (
                _redact(_build_args_dict(fn, args, kwargs), redact) if log else {}
            )
            if log and before:
                log.log(event_name, args_dict)
            result = fn(self, *args, **kwargs)
            if log and after:
                result_data: dict[str, Any] = {**args_dict}
                if isinstance(result, dict):
                    result_data["result"] = _redact(result, redact)
                elif result is not None:
                    result_data["result"] = _serialize_value(result)
                log.log(f"{event_name}.result", result_data)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def _serialize_value(value: Any) -> Any:
    """Best-effort serialization for log entries."""
    if isinstance(value, bytes):
        return base64.b64encode(value).decode()
    if isinstance(value, str | int | float | bool | type(None)):
        return value
    return str(value)
