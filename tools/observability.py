"""Observability helpers for instrumenting engine operations."""

from __future__ import annotations

import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, ParamSpec, TypeVar

from pydantic import BaseModel, ValidationError

from closet_app.logging_config import (
    ensure_correlation_id,
    get_logger,
    log_event,
    redact_for_log,
)

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _summarise_arguments(arguments: Dict[str, Any], max_keys: int = 6) -> dict:
    summary: dict = {}
    for name, value in arguments.items():
        if name == "self":
            continue
        if len(summary) >= max_keys:
            summary["truncated"] = True
            break
        summary[name] = f"<{len(value)} values>" if isinstance(value, (list, tuple, set, frozenset)) else value
    return redact_for_log(summary)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def instrument_operation(
    operation: str,
    input_model: type[BaseModel] | None = None,
    on_validation_error: Callable[[ValidationError], R] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Wrap a callable to validate its inputs and emit structured logs.

    When ``input_model`` is given, the call's arguments (positional or
    keyword) named by the model's fields are validated and replaced by the
    validated values, so model defaults fill in omitted arguments.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()
            bound = signature.bind_partial(*args, **kwargs)

            if input_model is not None:
                fields = {
                    name: value for name, value in bound.arguments.items() if name in input_model.model_fields
                }
                try:
                    validated = input_model.model_validate(fields).model_dump()
                except ValidationError as exc:
                    log_event(
                        LOGGER,
                        logging.WARNING,
                        "operation_validation_failed",
                        operation=operation,
                        correlation_id=correlation_id,
                        errors=redact_for_log(exc.errors(include_url=False)),
                    )
                    if on_validation_error is None:
                        raise
                    return on_validation_error(exc)
                bound.arguments.update(
                    {name: value for name, value in validated.items() if name in signature.parameters}
                )

            log_event(
                LOGGER,
                logging.INFO,
                "operation_call_started",
                operation=operation,
                correlation_id=correlation_id,
                arguments=_summarise_arguments(bound.arguments),
            )
            try:
                result = func(*bound.args, **bound.kwargs)
            except Exception:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "operation_call_failed",
                    operation=operation,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(start),
                    exc_info=True,
                )
                raise
            log_event(
                LOGGER,
                logging.INFO,
                "operation_call_completed",
                operation=operation,
                correlation_id=correlation_id,
                duration_ms=_elapsed_ms(start),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_operation"]
