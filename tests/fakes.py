"""
Shared fakes for the SDK tests.

``FakeApi`` stands in for ``MinaTokensAPI``: it records every call and replays
scripted responses per job id / transaction hash. The last scripted item is
sticky, so a terminal state stays terminal when polled again. Items that are
exceptions are raised instead of returned.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from minatokens_sdk.errors import ApiError
from minatokens_sdk.inclusion import TransactionWatcher
from minatokens_sdk.jobs import JobPoller
from minatokens_sdk.polling import PollBudget
from minatokens_sdk.types import (JobId, JobResult, SignedTransaction,
                                  TransactionPayload, TransactionStatus)

FAST_BUDGET = PollBudget(interval_s=0.0, timeout_s=60.0, max_errors=5)


def transport_error(endpoint: str = "result") -> ApiError:
    return ApiError(endpoint=endpoint, message="network error: connection reset")


def job(status: Optional[str] = None, *, hash: Optional[str] = None, hashes: Optional[Sequence[Optional[str]]] = None, error: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {}
    if status is not None:
        body["jobStatus"] = status
    if hash is not None:
        body["hash"] = hash
    if hashes is not None:
        body["results"] = [{"hash": h} if h else {} for h in hashes]
    if error is not None:
        body["error"] = error
    return body


def tx(hash: str, status: str, *, details: Optional[Dict[str, Any]] = None, error: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"hash": hash, "status": status}
    if details is not None:
        body["details"] = details
    if error is not None:
        body["error"] = error
    return body


def unsigned(n: int) -> Dict[str, Any]:
    return {
        "minaSignerPayload": {"zkappCommand": f"cmd-{n}", "feePayer": {"fee": 100_000_000}},
        "serializedTransaction": f"serialized-{n}",
        "request": {"txType": "token:transfer", "index": n},
    }


class FakeClock:
    """Monotonic clock that only moves when the poller sleeps."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def time(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeApi:
    def __init__(
        self,
        *,
        jobs: Optional[Mapping[str, Sequence[Any]]] = None,
        txs: Optional[Mapping[str, Sequence[Any]]] = None,
        build_result: Optional[Mapping[str, Any]] = None,
        job_id: str = "job-1",
        budget: PollBudget = FAST_BUDGET,
        **timing: Any,
    ) -> None:
        self.calls: List[Tuple[str, Any]] = []
        self._jobs = {k: list(v) for k, v in (jobs or {}).items()}
        self._txs = {k: list(v) for k, v in (txs or {}).items()}
        self._build_result = build_result
        self._job_id = job_id
        self.jobs = JobPoller(self, budget, **timing)
        self.watcher = TransactionWatcher(self, budget, **timing)

    @staticmethod
    def _next(script: Dict[str, List[Any]], key: str) -> Any:
        seq = script[key]
        item = seq.pop(0) if len(seq) > 1 else seq[0]
        if isinstance(item, BaseException):
            raise item
        return item

    def polls(self, method: str) -> List[Any]:
        return [arg for (m, arg) in self.calls if m == method]

    async def get_proof(self, job_id: str) -> JobResult:
        self.calls.append(("result", job_id))
        return JobResult.model_validate(self._next(self._jobs, job_id))

    async def tx_status(self, hash: str) -> TransactionStatus:
        self.calls.append(("tx-status", hash))
        return TransactionStatus.model_validate(self._next(self._txs, hash))

    async def build(self, endpoint: str, params: Mapping[str, Any]) -> Mapping[str, Any]:
        self.calls.append(("build", (endpoint, dict(params))))
        assert self._build_result is not None
        return self._build_result

    async def prove(
        self,
        *,
        tx: Optional[TransactionPayload] = None,
        signed_data: Optional[str] = None,
        txs: Optional[Sequence[SignedTransaction]] = None,
    ) -> JobId:
        self.calls.append(("prove", {"tx": tx, "signed_data": signed_data, "txs": txs}))
        return JobId(job_id=self._job_id)


class RecordingSigner:
    def __init__(self, result: Any = "signed") -> None:
        self.payloads: List[Any] = []
        self._result = result

    def sign(self, payload: Any) -> Any:
        self.payloads.append(payload)
        if callable(self._result):
            return self._result(payload)
        return self._result
