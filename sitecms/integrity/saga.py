"""Ordered multi-step operations with per-step compensation."""

import asyncio
import functools
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, TypeVar

from sitecms.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def with_async_retry(
    max_retries: int = 3,
    base_delay: float = 0.1,
    max_delay: float = 2.0,
    backoff_factor: float = 2.0,
    retry_on: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator that retries a coroutine function with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts
        base_delay: Initial delay between retries in seconds
        max_delay: Maximum delay between retries in seconds
        backoff_factor: Multiplier for exponential backoff
        retry_on: Tuple of exception types to retry on

    Returns:
        Decorated coroutine function with retry logic
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except retry_on as e:
                    if attempt == max_retries:
                        raise
                    delay = min(base_delay * (backoff_factor**attempt), max_delay)
                    logger.debug(
                        "retrying_operation",
                        operation=getattr(func, "__name__", repr(func)),
                        attempt=attempt + 1,
                        max_attempts=max_retries + 1,
                        delay=round(delay, 2),
                        error=str(e),
                    )
                    await asyncio.sleep(delay)
            raise RuntimeError("Unexpected retry loop exit")

        return wrapper

    return decorator


@dataclass(frozen=True)
class SagaStep:
    """One step of a saga.

    ``compensation`` runs when ``action`` raises. Its result replaces the
    step's result; if it raises too, the step is recorded as failed.
    """

    name: str
    action: Callable[[], Awaitable[Any]]
    compensation: Optional[Callable[[], Awaitable[Any]]] = None


@dataclass
class StepOutcome:
    name: str
    ok: bool
    result: Any = None
    error: Optional[str] = None
    compensated: bool = False


@dataclass
class SagaOutcome:
    steps: list[StepOutcome] = field(default_factory=list)

    def __getitem__(self, name: str) -> StepOutcome:
        for step in self.steps:
            if step.name == name:
                return step
        raise KeyError(name)

    @property
    def ok(self) -> bool:
        return all(step.ok for step in self.steps)


async def run_saga(steps: Sequence[SagaStep], **context: Any) -> SagaOutcome:
    """Run every step in order.

    A failing step does not stop later steps; each step decides for itself
    whether an earlier failure matters. ``context`` is bound to the log
    lines of this run.
    """
    outcome = SagaOutcome()
    for step in steps:
        try:
            result = await step.action()
            outcome.steps.append(StepOutcome(step.name, ok=True, result=result))
            continue
        except Exception as e:
            logger.warning("saga_step_failed", step=step.name, error=str(e), **context)
            error = e

        if step.compensation is None:
            outcome.steps.append(StepOutcome(step.name, ok=False, error=str(error)))
            continue
        try:
            result = await step.compensation()
        except Exception as e:
            logger.error(
                "saga_compensation_failed", step=step.name, error=str(e), **context
            )
            outcome.steps.append(
                StepOutcome(step.name, ok=False, error=str(e), compensated=True)
            )
            continue
        logger.info("saga_step_compensated", step=step.name, **context)
        outcome.steps.append(
            StepOutcome(step.name, ok=True, result=result, compensated=True)
        )
    return outcome
