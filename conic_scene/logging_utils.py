"""DEBUG call tracing for the scene operations.

``apply_debug_logging(globals(), logger=logger)`` at the bottom of a module
wraps its public functions and public methods so that every call logs its
arguments and result.  Values are summarised for the log: entities print as
``<point pA>``, whole collections as kind counts, coefficient records and
arrays compactly, so a trace of a drag stays readable.
"""

from __future__ import annotations

import inspect
import logging
import reprlib
from functools import wraps
from typing import Any, Callable, Iterable, Mapping, MutableMapping, Optional, Sequence, Set, TypeVar, cast

import numpy as np

from .model import ConicCoeffs, is_entity

F = TypeVar("F", bound=Callable[..., Any])

_MAX_ITEMS = 5
_MAX_LENGTH = 240

_short = reprlib.Repr()
_short.maxstring = 60
_short.maxother = 120


def _describe_entities(values: Sequence[Any]) -> str:
    counts: dict = {}
    for item in values:
        counts[item.kind] = counts.get(item.kind, 0) + 1
    detail = ", ".join(f"{kind}={count}" for kind, count in sorted(counts.items()))
    return f"<{len(values)} entities: {detail}>"


def describe(value: Any) -> str:
    """Return a short, log-friendly rendering of ``value``."""

    if is_entity(value):
        return f"<{value.kind} {value.id}{' hidden' if value.hidden else ''}>"
    if isinstance(value, ConicCoeffs):
        return "ConicCoeffs(" + ", ".join(f"{v:.4g}" for v in value.as_tuple()) + ")"
    if isinstance(value, float):
        return f"{value:.6g}"
    if isinstance(value, np.ndarray):
        text = f"ndarray{tuple(value.shape)}"
        if 0 < value.size <= 9:
            text += " " + np.array2string(value, precision=4, separator=", ")
        return text
    if hasattr(value, "converged") and hasattr(value, "entities"):
        # ResolveReport
        return (
            f"<report {describe(value.entities)} passes={value.passes}"
            f" converged={value.converged}>"
        )
    if isinstance(value, Mapping):
        items = [f"{key}={describe(val)}" for key, val in list(value.items())[:_MAX_ITEMS]]
        if len(value) > _MAX_ITEMS:
            items.append("...")
        return "{" + ", ".join(items) + "}"
    if isinstance(value, (list, tuple)):
        if value and all(is_entity(item) for item in value):
            return _describe_entities(value)
        items = [describe(item) for item in value[:_MAX_ITEMS]]
        if len(value) > _MAX_ITEMS:
            items.append("...")
        inner = ", ".join(items)
        return f"({inner})" if isinstance(value, tuple) else f"[{inner}]"

    text = _short.repr(value)
    if len(text) > _MAX_LENGTH:
        text = text[:_MAX_LENGTH] + "..."
    return text


def _describe_call(args: Sequence[Any], kwargs: Mapping[str, Any]) -> str:
    parts = [describe(arg) for arg in args]
    parts.extend(f"{key}={describe(val)}" for key, val in kwargs.items())
    return ", ".join(parts) or "no-args"


def debug_log_call(logger: logging.Logger, *, name: Optional[str] = None) -> Callable[[F], F]:
    """Return a decorator that logs entry, result and failure at DEBUG level."""

    def decorator(func: F) -> F:
        if getattr(func, "_debug_logging_wrapped", False):
            return func
        label = name or func.__qualname__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            if not logger.isEnabledFor(logging.DEBUG):
                return func(*args, **kwargs)
            logger.debug("Entering %s (%s)", label, _describe_call(args, kwargs))
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                logger.debug("Exception in %s: %s: %s", label, type(exc).__name__, exc)
                raise
            logger.debug("Exiting %s -> %s", label, describe(result))
            return result

        setattr(wrapper, "_debug_logging_wrapped", True)
        return cast(F, wrapper)

    return decorator


def _wrap_methods(cls: type, logger: logging.Logger, skip: Set[str]) -> None:
    for attr, value in list(vars(cls).items()):
        label = f"{cls.__name__}.{attr}"
        if attr.startswith("_") or attr in skip or label in skip:
            continue
        if inspect.isfunction(value) and value.__module__ == cls.__module__:
            setattr(cls, attr, debug_log_call(logger, name=label)(value))


def apply_debug_logging(
    namespace: MutableMapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
    skip: Optional[Iterable[str]] = None,
) -> None:
    """Wrap the public functions and methods defined in ``namespace``.

    Private helpers (leading underscore) are left alone so that per-entity
    rules do not flood the log; only whole-collection operations are traced.
    """

    module_name = namespace.get("__name__")
    logger = logger or logging.getLogger(module_name or __name__)
    skip_set: Set[str] = set(skip or ())

    for name, value in list(namespace.items()):
        if name.startswith("_") or name in skip_set:
            continue
        if getattr(value, "__module__", None) != module_name:
            continue
        if inspect.isfunction(value):
            namespace[name] = debug_log_call(logger, name=name)(value)
        elif inspect.isclass(value):
            _wrap_methods(value, logger, skip_set)


__all__ = ["apply_debug_logging", "debug_log_call", "describe"]
