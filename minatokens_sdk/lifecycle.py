"""
minatokens_sdk.lifecycle
========================

Drive a transaction from build to on-chain confirmation.

Stages
------
1) build    : a build endpoint returns one unsigned transaction, or a batch
              (``{"txs": [...]}``, e.g. an airdrop).
2) sign     : an external ``Signer`` signs each transaction's signer payload.
              This module never holds key material.
3) prove    : the signed transaction(s) go to ``prove`` and yield a job id.
4) job      : the job poller waits for one hash per transaction.
5) include  : the inclusion watcher confirms each hash, one after the other,
              in input order.

Failure surfaces
----------------
- job failed                → JobFailedError
- job poll budget exhausted → PollExhaustedError (subject = job id)
- wrong number of hashes    → JobFailedError
- SDK error on hash k       → BatchIncompleteError with the k-1 hashes already
                              confirmed. Nothing is rolled back.
"""

from __future__ import annotations

import inspect
import json
import logging
from dataclasses import dataclass, field
from typing import (Any, Awaitable, List, Mapping, Optional, Protocol,
                    Sequence, Union)

from .errors import (BatchIncompleteError, ConfigError, JobFailedError,
                     MinaTokensError, PollExhaustedError)
from .inclusion import InclusionResult, TransactionWatcher
from .jobs import JobPoller, JobState
from .types import (BatchTransactions, JobId, SignedTransaction,
                    TransactionPayload)

SignatureLike = Union[str, Mapping[str, Any]]


class Signer(Protocol):
    """
    External signing collaborator.

    ``sign`` receives the canonical signer payload of one transaction and
    returns the signed data, either as a string or as a mapping that will be
    JSON-encoded. It may be a coroutine function.
    """

    def sign(self, payload: Any) -> Union[SignatureLike, Awaitable[SignatureLike]]: ...


class _LifecycleApi(Protocol):
    @property
    def jobs(self) -> JobPoller: ...

    @property
    def watcher(self) -> TransactionWatcher: ...

    async def build(self, endpoint: str, params: Mapping[str, Any]) -> Mapping[str, Any]: ...

    async def prove(
        self,
        *,
        tx: Optional[TransactionPayload] = None,
        signed_data: Optional[str] = None,
        txs: Optional[Sequence[SignedTransaction]] = None,
    ) -> JobId: ...


@dataclass(frozen=True)
class LifecycleResult:
    job_id: str
    hashes: List[str] = field(default_factory=list)
    confirmations: List[InclusionResult] = field(default_factory=list)


async def sign_payload(signer: Signer, payload: Any) -> str:
    sig = signer.sign(payload)
    if inspect.isawaitable(sig):
        sig = await sig
    if isinstance(sig, str):
        return sig
    if isinstance(sig, Mapping):
        return json.dumps(dict(sig), separators=(",", ":"))
    raise TypeError(f"signer returned {type(sig).__name__}, expected str or mapping")


def transactions_from_build(res: Union[Mapping[str, Any], TransactionPayload, BatchTransactions]) -> List[TransactionPayload]:
    """Normalize a build response into an ordered list of unsigned transactions."""
    if isinstance(res, TransactionPayload):
        return [res]
    if isinstance(res, BatchTransactions):
        txs = list(res.txs)
    elif "txs" in res:
        txs = list(BatchTransactions.model_validate(dict(res)).txs)
    else:
        return [TransactionPayload.model_validate(dict(res))]
    if not txs:
        raise ConfigError("build returned an empty batch")
    return txs


class TransactionLifecycle:
    """Compose build → sign → prove → job → inclusion into one awaitable call."""

    def __init__(
        self,
        api: _LifecycleApi,
        *,
        jobs: Optional[JobPoller] = None,
        watcher: Optional[TransactionWatcher] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._api = api
        self._jobs = jobs or api.jobs
        self._watcher = watcher or api.watcher
        self._log = logger or logging.getLogger("minatokens.lifecycle")

    async def execute(self, endpoint: str, params: Mapping[str, Any], signer: Signer) -> LifecycleResult:
        """Build through ``endpoint`` and carry the result to confirmation."""
        self._log.info("Building transaction via %s", endpoint)
        built = await self._api.build(endpoint, params)
        return await self.prove_and_confirm(transactions_from_build(built), signer)

    async def submit(self, txs: Sequence[TransactionPayload], signer: Signer) -> str:
        """Sign and submit for proving; returns the job id."""
        if not txs:
            raise ConfigError("nothing to submit")
        signed = [SignedTransaction(tx=tx, signed_data=await sign_payload(signer, tx.signer_payload)) for tx in txs]
        if len(signed) == 1:
            job = await self._api.prove(tx=signed[0].tx, signed_data=signed[0].signed_data)
        else:
            job = await self._api.prove(txs=signed)
        self._log.info("Submitted %d transaction(s) for proving, job %s", len(signed), job.job_id)
        return job.job_id

    async def await_hashes(self, job_id: str, expected: int) -> List[str]:
        outcome = await self._jobs.wait(job_id)
        if outcome.state is JobState.FAILED:
            raise JobFailedError(job_id=job_id, reason=outcome.reason)
        if outcome.state is JobState.EXHAUSTED:
            raise PollExhaustedError(
                subject=job_id,
                reason=outcome.reason or "timeout",
                attempts=outcome.attempts,
                errors=outcome.errors,
            )
        if len(outcome.hashes) != expected:
            raise JobFailedError(
                job_id=job_id,
                reason=f"expected {expected} transaction hash(es), got {len(outcome.hashes)}",
            )
        return list(outcome.hashes)

    async def confirm(self, job_id: str, hashes: Sequence[str]) -> List[InclusionResult]:
        """Watch each hash in order; stop at the first one that does not apply."""
        confirmations: List[InclusionResult] = []
        for tx_hash in hashes:
            try:
                confirmations.append(await self._watcher.wait(tx_hash))
            except MinaTokensError as exc:
                done = [c.hash for c in confirmations]
                self._log.warning(
                    "Job %s: transaction %s did not confirm after %d confirmed: %s",
                    job_id,
                    tx_hash,
                    len(done),
                    exc,
                )
                raise BatchIncompleteError(job_id=job_id, failed_hash=tx_hash, confirmed=done, cause=exc) from exc
        return confirmations

    async def prove_and_confirm(
        self,
        txs: Union[TransactionPayload, BatchTransactions, Sequence[TransactionPayload]],
        signer: Signer,
    ) -> LifecycleResult:
        if isinstance(txs, (TransactionPayload, BatchTransactions)):
            txs = transactions_from_build(txs)
        items = list(txs)
        job_id = await self.submit(items, signer)
        hashes = await self.await_hashes(job_id, len(items))
        confirmations = await self.confirm(job_id, hashes)
        self._log.info("Job %s: all %d transaction(s) applied", job_id, len(confirmations))
        return LifecycleResult(job_id=job_id, hashes=hashes, confirmations=confirmations)


__all__ = [
    "Signer",
    "LifecycleResult",
    "TransactionLifecycle",
    "sign_payload",
    "transactions_from_build",
]
