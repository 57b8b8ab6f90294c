"""
minatokens_sdk.jobs
===================

Wait for a proving job to produce transaction hashes.

A job resolves three ways and callers can tell them apart:

- ``SUCCEEDED``  the result carries one hash per proved transaction;
- ``FAILED``     the service marked the job failed (an expected outcome, so
                 it is returned, not raised);
- ``EXHAUSTED``  the deadline or the transport error budget ran out first.
                 The job may still be running server-side.

``wait_for_proofs`` / ``wait_for_job_result`` collapse FAILED and EXHAUSTED
into ``None`` for callers that only care whether hashes were obtained.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Protocol

from .errors import ConfigError
from .polling import PollBudget, PollOutcome, Verdict, poll_until
from .types import JobResult


class _JobApi(Protocol):
    """Minimal interface expected from ``MinaTokensAPI``."""

    async def get_proof(self, job_id: str) -> JobResult: ...


class JobState(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class JobOutcome:
    job_id: str
    state: JobState
    hashes: List[str] = field(default_factory=list)
    # failure text from the service, or "timeout" / "errors" when exhausted
    reason: Optional[str] = None
    attempts: int = 0
    errors: int = 0

    @property
    def ok(self) -> bool:
        return self.state is JobState.SUCCEEDED

    @property
    def hash(self) -> Optional[str]:
        return self.hashes[0] if self.hashes else None


def classify_job(result: JobResult) -> Verdict[List[str]]:
    hashes = result.hashes
    if hashes:
        return Verdict.success(hashes)
    # A failed proof inside a batch fails the job even if jobStatus lags behind
    reason = result.failure
    if reason is not None:
        return Verdict.failure(reason)
    return Verdict.pending()


class JobPoller:
    """
    Poll the ``result`` endpoint for a job until it resolves.

    Defaults: 10 s between polls, 10 minutes overall, 100 transport errors.
    """

    def __init__(
        self,
        api: _JobApi,
        budget: PollBudget,
        *,
        logger: Optional[logging.Logger] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._api = api
        self._budget = budget
        self._log = logger or logging.getLogger("minatokens.jobs")
        self._timing = {k: v for k, v in (("sleep", sleep), ("clock", clock)) if v is not None}

    @property
    def budget(self) -> PollBudget:
        return self._budget

    async def wait(self, job_id: str, *, budget: Optional[PollBudget] = None) -> JobOutcome:
        if not job_id:
            raise ConfigError("job_id is required")
        self._log.info("Waiting for job %s", job_id)

        async def _fetch() -> JobResult:
            return await self._api.get_proof(job_id)

        res = await poll_until(
            _fetch,
            classify_job,
            budget or self._budget,
            label=f"job {job_id}",
            logger=self._log,
            **self._timing,
        )
        if res.outcome is PollOutcome.SUCCESS:
            hashes = list(res.value or [])
            self._log.info("Job %s produced %d transaction hash(es): %s", job_id, len(hashes), ", ".join(hashes))
            return JobOutcome(job_id, JobState.SUCCEEDED, hashes, attempts=res.attempts, errors=res.errors)
        if res.outcome is PollOutcome.FAILURE:
            self._log.info("Job %s failed: %s", job_id, res.reason)
            return JobOutcome(job_id, JobState.FAILED, reason=res.reason, attempts=res.attempts, errors=res.errors)
        return JobOutcome(job_id, JobState.EXHAUSTED, reason=res.reason, attempts=res.attempts, errors=res.errors)

    async def wait_for_proofs(self, job_id: str) -> Optional[List[str]]:
        """All hashes of the job in submission order, or None if not obtained."""
        outcome = await self.wait(job_id)
        return outcome.hashes if outcome.ok else None

    async def wait_for_job_result(self, job_id: str) -> Optional[str]:
        """First transaction hash of the job, or None if not obtained."""
        outcome = await self.wait(job_id)
        return outcome.hash if outcome.ok else None


__all__ = ["JobState", "JobOutcome", "JobPoller", "classify_job"]
