"""
Wait for a submitted transaction to be included in a block.

``applied`` returns an ``InclusionResult`` holding the detail payload of the
final poll. ``failed`` raises ``TransactionFailedError`` right away since no
amount of polling changes it. Running out of time or error budget raises
``PollExhaustedError``, which is a different error on purpose: the
transaction may still land later.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol

from .errors import ConfigError, PollExhaustedError, TransactionFailedError
from .polling import PollBudget, PollOutcome, Verdict, poll_until
from .types import InclusionState, TransactionStatus


class _TxApi(Protocol):
    async def tx_status(self, hash: str) -> TransactionStatus: ...


@dataclass(frozen=True)
class InclusionResult:
    hash: str
    state: InclusionState
    details: Optional[Dict[str, Any]] = None
    attempts: int = 0
    errors: int = 0


def classify_inclusion(status: TransactionStatus) -> Verdict[TransactionStatus]:
    state = status.state
    if not state.terminal:
        return Verdict.pending()
    if state is InclusionState.APPLIED:
        return Verdict.success(status)
    return Verdict.failure(status.error or "transaction failed", value=status)


class TransactionWatcher:
    """
    Poll ``tx-status`` for one hash. Blocking from the caller's side; run
    several watchers as separate tasks for concurrent progress.

    Defaults: 30 s between polls, 5 hours overall, 100 transport errors.
    """

    def __init__(
        self,
        api: _TxApi,
        budget: PollBudget,
        *,
        logger: Optional[logging.Logger] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._api = api
        self._budget = budget
        self._log = logger or logging.getLogger("minatokens.inclusion")
        self._timing = {k: v for k, v in (("sleep", sleep), ("clock", clock)) if v is not None}

    @property
    def budget(self) -> PollBudget:
        return self._budget

    async def wait(self, tx_hash: str, *, budget: Optional[PollBudget] = None) -> InclusionResult:
        """
        Block until ``tx_hash`` is applied.

        Raises:
            TransactionFailedError if the ledger reports failure
            PollExhaustedError on timeout or too many transport errors
        """
        if not tx_hash:
            raise ConfigError("transaction hash is required")
        self._log.info("Waiting for transaction %s to be included in a block...", tx_hash)

        async def _fetch() -> TransactionStatus:
            return await self._api.tx_status(tx_hash)

        res = await poll_until(
            _fetch,
            classify_inclusion,
            budget or self._budget,
            label=f"tx {tx_hash}",
            logger=self._log,
            **self._timing,
        )
        if res.outcome is PollOutcome.SUCCESS:
            status = res.value
            details = status.details if status is not None else None
            self._log.info("Transaction %s included in a block", tx_hash)
            return InclusionResult(tx_hash, InclusionState.APPLIED, details, res.attempts, res.errors)
        if res.outcome is PollOutcome.FAILURE:
            status = res.value
            raise TransactionFailedError(
                tx_hash=tx_hash,
                error=res.reason,
                details=status.details if status is not None else None,
            )
        raise PollExhaustedError(
            subject=tx_hash,
            reason=res.reason or "timeout",
            attempts=res.attempts,
            errors=res.errors,
            last_error=res.last_error,
        )


__all__ = ["InclusionResult", "TransactionWatcher", "classify_inclusion"]
