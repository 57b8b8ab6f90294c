"""
Typed error classes for the MinaTokens SDK.

The taxonomy mirrors how a proving workflow can end badly:

- ``ApiError``               transport fault or non-2xx reply from the service.
                             Pollers count these and keep going.
- ``TransactionFailedError`` the ledger reported the transaction as failed.
- ``JobFailedError``         the proving job failed (raised by the orchestrator;
                             the job poller itself returns a clean outcome).
- ``PollExhaustedError``     deadline or error budget ran out before a terminal
                             state was seen. The true state is unknown.
- ``BatchIncompleteError``   a hash in a batch failed after earlier ones were
                             confirmed.
- ``ConfigError`` / ``UnknownStatusError`` precondition faults, never retried.

Everything derives from ``MinaTokensError`` so callers can catch broadly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

__all__ = [
    "MinaTokensError",
    "ConfigError",
    "UnknownStatusError",
    "ApiError",
    "TransactionFailedError",
    "JobFailedError",
    "PollExhaustedError",
    "BatchIncompleteError",
]


class MinaTokensError(Exception):
    """Base class for all SDK errors."""


class ConfigError(MinaTokensError):
    """Invalid configuration or a missing required identifier."""


class UnknownStatusError(MinaTokensError):
    """The service returned a status string this client does not recognize."""

    def __init__(self, kind: str, status: Any) -> None:
        super().__init__(f"unrecognized {kind} status: {status!r}")
        self.kind = kind
        self.status = status


@dataclass(slots=True, eq=False)
class ApiError(MinaTokensError):
    """Raised by the gateway when a call fails at the transport or HTTP level."""

    endpoint: str
    message: str
    status: Optional[int] = None
    data: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        http = f" http={self.status}" if self.status is not None else ""
        return f"API[{self.endpoint}]{http}: {self.message}"

    @property
    def is_transport(self) -> bool:
        """True when no HTTP response was received at all."""
        return self.status is None


@dataclass(slots=True, eq=False)
class TransactionFailedError(MinaTokensError):
    """
    Raised when the service reports a transaction as failed on-chain.

    Not retryable: polling again will not change the outcome.
    """

    tx_hash: str
    error: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        reason = f": {self.error}" if self.error else ""
        return f"Transaction {self.tx_hash} failed{reason} details={self.details!r}"


@dataclass(slots=True, eq=False)
class JobFailedError(MinaTokensError):
    """Raised by the lifecycle orchestrator when a proving job ends in failure."""

    job_id: str
    reason: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Job {self.job_id} failed: {self.reason or 'no reason given'}"


@dataclass(slots=True, eq=False)
class PollExhaustedError(MinaTokensError):
    """
    Raised when a polling loop runs out of budget without a terminal state.

    Fields:
      - subject: job id or transaction hash being polled
      - reason: "timeout" or "errors"
      - attempts: number of fetches performed
      - errors: number of transport faults counted
      - last_error: the last transport fault, if any
    """

    subject: str
    reason: str
    attempts: int = 0
    errors: int = 0
    last_error: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        what = "timeout" if self.reason == "timeout" else "too many errors"
        return (
            f"{self.subject} not resolved ({what}) after {self.attempts} polls, "
            f"{self.errors} errors"
        )


@dataclass(slots=True, eq=False)
class BatchIncompleteError(MinaTokensError):
    """
    Raised when a hash in a proved batch fails or times out.

    ``confirmed`` lists the hashes already confirmed applied, in input order.
    No compensation is attempted; reconciliation is up to the caller.
    """

    job_id: str
    failed_hash: str
    confirmed: List[str] = field(default_factory=list)
    cause: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return (
            f"Batch from job {self.job_id} stopped at {self.failed_hash} "
            f"({len(self.confirmed)} confirmed): {self.cause}"
        )

    @property
    def index(self) -> int:
        """Zero-based position of the failed hash within the batch."""
        return len(self.confirmed)
