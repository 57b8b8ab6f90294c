"""
Wire models for the MinaTokens API.

- Request and response bodies are pydantic v2 models with camelCase aliases
  (the service speaks camelCase JSON, Python code uses snake_case).
- Response models allow extra fields: the service adds fields over time and
  detail payloads are passed through to callers untouched.
- Job and inclusion statuses are closed enums. Unknown strings raise
  ``UnknownStatusError`` instead of silently reading as "pending".
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .errors import ConfigError, UnknownStatusError

JsonDict = Dict[str, Any]


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_body(self) -> JsonDict:
        """Serialize for the wire: camelCase keys, no nulls."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class RequestModel(ApiModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


# ----------------------------- Statuses -------------------------------------


class JobStatus(str, Enum):
    CREATED = "created"
    STARTED = "started"
    RESTARTED = "restarted"
    FINISHED = "finished"
    USED = "used"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: Any) -> "JobStatus":
        try:
            return cls(str(value).lower())
        except ValueError:
            raise UnknownStatusError("job", value) from None

    @property
    def terminal(self) -> bool:
        # Success is decided by the presence of hashes, not by a status string
        return self is JobStatus.FAILED


class InclusionState(str, Enum):
    PENDING = "pending"
    APPLIED = "applied"
    FAILED = "failed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "InclusionState":
        try:
            return cls(str(value).lower())
        except ValueError:
            raise UnknownStatusError("transaction", value) from None

    @property
    def terminal(self) -> bool:
        return self in (InclusionState.APPLIED, InclusionState.FAILED)


# ----------------------------- Jobs -----------------------------------------


class JobId(ApiModel):
    job_id: str


class ProofResult(ApiModel):
    hash: Optional[str] = None
    tx: Optional[str] = None
    status: Optional[str] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return (self.status or "").lower() == JobStatus.FAILED.value


class JobResult(ApiModel):
    """Response of the ``result`` endpoint for one proving job."""

    job_status: Optional[str] = None
    hash: Optional[str] = None
    results: Optional[List[ProofResult]] = None
    error: Optional[str] = None

    @property
    def status(self) -> Optional[JobStatus]:
        if self.job_status is None:
            return None
        return JobStatus.parse(self.job_status)

    @property
    def hashes(self) -> List[str]:
        """
        Transaction hashes in submission order, or [] while any is missing.
        """
        if self.results:
            hashes = [r.hash for r in self.results]
            if all(hashes):
                return [h for h in hashes if h]
            return []
        return [self.hash] if self.hash else []

    @property
    def failure(self) -> Optional[str]:
        """
        Failure text once the job or any of its proofs failed, else None.
        """
        failed = [r for r in self.results or [] if r.failed]
        if failed:
            return failed[0].error or self.error or "proof failed"
        status = self.status
        if status is not None and status.terminal:
            return self.error or "job failed"
        return None


# ----------------------------- Transactions ---------------------------------


class TransactionStatus(ApiModel):
    """Response of the ``tx-status`` endpoint."""

    hash: str
    status: str
    error: Optional[str] = None
    details: Optional[JsonDict] = None

    @property
    def state(self) -> InclusionState:
        return InclusionState.parse(self.status)


class TransactionPayload(ApiModel):
    """
    Unsigned transaction returned by a build endpoint.

    Only the fields the lifecycle needs are declared; the rest of the service's
    response travels along as extra fields and is echoed back to ``prove``.
    """

    mina_signer_payload: Optional[Any] = None
    payload: Optional[Any] = None
    serialized_transaction: Optional[str] = None
    transaction: Optional[str] = None
    request: Optional[JsonDict] = None

    @property
    def signer_payload(self) -> Any:
        """The canonical object handed to the external signer."""
        if self.mina_signer_payload is not None:
            return self.mina_signer_payload
        if self.payload is not None:
            return self.payload
        raise ConfigError("transaction has no signer payload")


class BatchTransactions(ApiModel):
    txs: List[TransactionPayload]


class SignedTransaction(RequestModel):
    tx: TransactionPayload
    signed_data: str


class ProveRequest(RequestModel):
    tx: Optional[TransactionPayload] = None
    signed_data: Optional[str] = None
    txs: Optional[List[SignedTransaction]] = None


# ----------------------------- Token / NFT info -----------------------------


class TokenState(ApiModel):
    token_address: str
    token_id: Optional[str] = None
    admin_contract_address: Optional[str] = None
    admin_address: Optional[str] = None
    admin_token_balance: Optional[int] = None
    total_supply: Optional[int] = None
    is_paused: Optional[bool] = None
    decimals: Optional[int] = None
    token_symbol: Optional[str] = None
    verification_key_hash: Optional[str] = None
    uri: Optional[str] = None
    version: Optional[int] = None


class BalanceRequest(RequestModel):
    token_address: Optional[str] = None
    token_id: Optional[str] = None
    address: str


class BalanceResponse(ApiModel):
    token_address: Optional[str] = None
    token_id: Optional[str] = None
    address: str
    balance: Optional[int] = None


class NonceResponse(ApiModel):
    address: str
    nonce: Optional[int] = None


class FaucetResponse(ApiModel):
    success: bool
    hash: Optional[str] = None
    error: Optional[str] = None


class NFTInfo(ApiModel):
    contract_address: Optional[str] = None
    nft_address: Optional[str] = None
    token_id: Optional[str] = None
    token_symbol: Optional[str] = None
    name: Optional[str] = None
    owner: Optional[str] = None
    price: Optional[int] = None
    metadata: Optional[JsonDict] = None


# ----------------------------- Build requests -------------------------------


class WhitelistEntry(RequestModel):
    address: str
    amount: Optional[int] = None


class LaunchTokenParams(RequestModel):
    sender: str
    symbol: str
    decimals: int = 9
    uri: str
    admin_contract: Literal["standard", "advanced"] = "standard"
    whitelist: Optional[List[WhitelistEntry]] = None
    can_mint: Optional[Literal["anyone", "whitelist"]] = None
    memo: Optional[str] = None


TokenTxType = Literal[
    "mint",
    "transfer",
    "offer",
    "bid",
    "buy",
    "sell",
    "withdraw-offer",
    "withdraw-bid",
]


class TokenTransactionParams(RequestModel):
    tx_type: TokenTxType
    sender: str
    token_address: str
    to: Optional[str] = None
    amount: Optional[int] = None
    price: Optional[int] = None
    offer_address: Optional[str] = None
    bid_address: Optional[str] = None
    whitelist: Optional[List[WhitelistEntry]] = None
    nonce: Optional[int] = None
    memo: Optional[str] = None


class AirdropRecipient(RequestModel):
    address: str
    amount: int
    memo: Optional[str] = None


class AirdropParams(RequestModel):
    sender: str
    token_address: str
    recipients: List[AirdropRecipient] = Field(min_length=1)
    nonce: Optional[int] = None


class NftCollectionParams(RequestModel):
    collection_name: str
    sender: str
    symbol: str = "NFT"
    admin_contract: Literal["standard", "advanced"] = "standard"
    master_nft: JsonDict
    nonce: Optional[int] = None


class NftMintParams(RequestModel):
    sender: str
    collection_address: str
    nft_mint_params: JsonDict
    nonce: Optional[int] = None


class NftTransferParams(RequestModel):
    sender: str
    collection_address: str
    nft_address: str
    to: str
    nonce: Optional[int] = None


__all__ = [
    "JsonDict",
    "ApiModel",
    "JobStatus",
    "InclusionState",
    "JobId",
    "ProofResult",
    "JobResult",
    "TransactionStatus",
    "TransactionPayload",
    "BatchTransactions",
    "SignedTransaction",
    "ProveRequest",
    "TokenState",
    "BalanceRequest",
    "BalanceResponse",
    "NonceResponse",
    "FaucetResponse",
    "NFTInfo",
    "WhitelistEntry",
    "LaunchTokenParams",
    "TokenTxType",
    "TokenTransactionParams",
    "AirdropRecipient",
    "AirdropParams",
    "NftCollectionParams",
    "NftMintParams",
    "NftTransferParams",
]
