"""
Bounded polling with a cooperative wait.

One primitive serves both the job poller and the inclusion watcher:

    result = await poll_until(fetch, classify, budget, label="job abc")

- ``fetch`` is an async callable returning the raw status response.
- ``classify`` maps a response to a ``Verdict``: pending, success or failure.
- ``budget`` bounds the loop by wall-clock time and by a running count of
  transport faults.

Transport faults (``retry_on``, ``ApiError`` by default) are logged and
counted; every other exception propagates unchanged. Success and failure are
terminal: the loop returns immediately and never fetches again.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import (Any, Awaitable, Callable, Generic, Optional, Tuple, Type,
                    TypeVar)

from .errors import ApiError, ConfigError

__all__ = [
    "PollBudget",
    "VerdictKind",
    "Verdict",
    "PollOutcome",
    "PollResult",
    "poll_until",
]

T = TypeVar("T")
R = TypeVar("R")

_log = logging.getLogger("minatokens.polling")


@dataclass(frozen=True, slots=True)
class PollBudget:
    """Interval between polls, overall deadline, and transport error ceiling."""

    interval_s: float
    timeout_s: float
    max_errors: int

    def __post_init__(self) -> None:
        if self.interval_s < 0:
            raise ConfigError("poll interval must be >= 0")
        if self.timeout_s <= 0:
            raise ConfigError("poll timeout must be positive")
        if self.max_errors < 1:
            raise ConfigError("max_errors must be >= 1")


class VerdictKind(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True, slots=True)
class Verdict(Generic[T]):
    kind: VerdictKind
    value: Optional[T] = None
    reason: Optional[str] = None

    @classmethod
    def pending(cls) -> "Verdict[T]":
        return cls(VerdictKind.PENDING)

    @classmethod
    def success(cls, value: T) -> "Verdict[T]":
        return cls(VerdictKind.SUCCESS, value=value)

    @classmethod
    def failure(cls, reason: Optional[str] = None, value: Optional[T] = None) -> "Verdict[T]":
        return cls(VerdictKind.FAILURE, value=value, reason=reason)

    @property
    def terminal(self) -> bool:
        return self.kind is not VerdictKind.PENDING


class PollOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True, slots=True)
class PollResult(Generic[T]):
    outcome: PollOutcome
    value: Optional[T] = None
    # failure reason, or "timeout" / "errors" when exhausted
    reason: Optional[str] = None
    attempts: int = 0
    errors: int = 0
    elapsed_s: float = 0.0
    last_error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.outcome is PollOutcome.SUCCESS


async def poll_until(
    fetch: Callable[[], Awaitable[R]],
    classify: Callable[[R], Verdict[T]],
    budget: PollBudget,
    *,
    label: str = "poll",
    logger: Optional[logging.Logger] = None,
    retry_on: Tuple[Type[BaseException], ...] = (ApiError,),
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> PollResult[T]:
    """
    Fetch, classify, and wait until a terminal verdict or budget exhaustion.

    Returns a ``PollResult``; only non-transport exceptions (including those
    raised by ``classify``) escape.
    """
    log = logger or _log
    started = clock()
    attempts = 0
    errors = 0
    last_error: Optional[BaseException] = None

    def _elapsed() -> float:
        return clock() - started

    while errors < budget.max_errors and _elapsed() < budget.timeout_s:
        attempts += 1
        try:
            response = await fetch()
        except retry_on as exc:
            errors += 1
            last_error = exc
            log.warning("%s: poll %d failed (%d/%d errors): %s", label, attempts, errors, budget.max_errors, exc)
        else:
            verdict = classify(response)
            if verdict.terminal:
                ok = verdict.kind is VerdictKind.SUCCESS
                return PollResult(
                    PollOutcome.SUCCESS if ok else PollOutcome.FAILURE,
                    value=verdict.value,
                    reason=None if ok else verdict.reason,
                    attempts=attempts,
                    errors=errors,
                    elapsed_s=_elapsed(),
                    last_error=last_error,
                )
            log.debug("%s: pending after poll %d", label, attempts)

        if errors >= budget.max_errors:
            break
        remaining = budget.timeout_s - _elapsed()
        if remaining <= 0:
            break
        await sleep(min(budget.interval_s, remaining))

    reason = "errors" if errors >= budget.max_errors else "timeout"
    log.info("%s: gave up (%s) after %d polls, %d errors", label, reason, attempts, errors)
    return PollResult(
        PollOutcome.EXHAUSTED,
        reason=reason,
        attempts=attempts,
        errors=errors,
        elapsed_s=_elapsed(),
        last_error=last_error,
    )
