"""
minatokens_sdk.api.client
=========================

High-level async client for the MinaTokens API: one method per endpoint, plus
wait helpers that delegate to the job poller and the inclusion watcher.

Endpoints
---------
Read-only:
- info          → TokenState
- balance       → BalanceResponse
- nft           → NFTInfo
- nonce         → NonceResponse
- tx-status     → TransactionStatus
- result        → JobResult
- faucet        → FaucetResponse

Build (unsigned transactions):
- deploy                                   → TransactionPayload
- transaction (txType=mint|transfer|...)   → TransactionPayload
- airdrop                                  → BatchTransactions
- nft-launch / nft-mint / nft-transfer     → TransactionPayload

Proving:
- prove         → JobId

Example
-------
    from minatokens_sdk import MinaTokensAPI, SDKConfig

    async with MinaTokensAPI(SDKConfig(api_key="...", chain="devnet")) as api:
        tx = await api.transfer_tokens(sender=..., token_address=..., to=..., amount=10)
        job = await api.prove(tx=tx, signed_data=signer.sign(tx.signer_payload))
        hashes = await api.wait_for_proofs(job.job_id)
        await api.wait_for_transaction(hashes[0])
"""

from __future__ import annotations

import logging
from typing import (Any, Awaitable, Callable, Dict, List, Mapping, Optional,
                    Sequence, Type, TypeVar, Union)

from pydantic import BaseModel, ValidationError

from ..config import Chain, SDKConfig
from ..errors import ApiError, ConfigError
from ..inclusion import InclusionResult, TransactionWatcher
from ..jobs import JobOutcome, JobPoller
from ..types import (AirdropParams, AirdropRecipient, BalanceRequest,
                     BalanceResponse, BatchTransactions, FaucetResponse,
                     JobId, JobResult, LaunchTokenParams, NFTInfo,
                     NftCollectionParams, NftMintParams, NftTransferParams,
                     NonceResponse, ProveRequest, SignedTransaction,
                     TokenState, TokenTransactionParams, TransactionPayload,
                     TransactionStatus)
from .http import ApiTransport

JsonDict = Dict[str, Any]
TxLike = Union[TransactionPayload, Mapping[str, Any]]
M = TypeVar("M", bound=BaseModel)


def _as_payload(tx: TxLike) -> TransactionPayload:
    if isinstance(tx, TransactionPayload):
        return tx
    return TransactionPayload.model_validate(dict(tx))


class MinaTokensAPI:
    """
    Client bound to one API key and one chain.

    Parameters
    ----------
    config : SDKConfig | None
        Explicit configuration. If omitted it is loaded from the environment,
        with ``api_key`` / ``chain`` taking precedence.
    transport : ApiTransport | None
        Pre-built gateway (mostly for tests).
    sleep, clock : optional
        Passed to the pollers; tests inject fakes to avoid real waiting.
    """

    def __init__(
        self,
        config: Optional[SDKConfig] = None,
        *,
        api_key: Optional[str] = None,
        chain: Optional[Union[str, Chain]] = None,
        transport: Optional[ApiTransport] = None,
        logger: Optional[logging.Logger] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if config is None:
            config = transport.config if transport is not None else SDKConfig.from_env(api_key=api_key, chain=chain)
        self._cfg = config
        self._transport = transport or ApiTransport(config, logger=logger)
        self._jobs = JobPoller(self, config.job_budget(), sleep=sleep, clock=clock)
        self._watcher = TransactionWatcher(self, config.tx_budget(), sleep=sleep, clock=clock)

    @property
    def config(self) -> SDKConfig:
        return self._cfg

    @property
    def chain(self) -> Chain:
        return self._cfg.chain

    @property
    def transport(self) -> ApiTransport:
        return self._transport

    @property
    def jobs(self) -> JobPoller:
        return self._jobs

    @property
    def watcher(self) -> TransactionWatcher:
        return self._watcher

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> "MinaTokensAPI":
        await self._transport.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def call(self, endpoint: str, body: Optional[Mapping[str, Any]] = None) -> JsonDict:
        return await self._transport.call(endpoint, body)

    async def _fetch(self, model: Type[M], endpoint: str, body: Mapping[str, Any]) -> M:
        res = await self.call(endpoint, body)
        try:
            return model.model_validate(res)
        except ValidationError as exc:
            # A 200 reply that does not fit the model counts as an API fault
            message = str(res.get("error") or f"malformed {model.__name__} response")
            raise ApiError(endpoint=endpoint, message=message, data=res) from exc

    # -------------------------------------------------------------------------
    # Info
    # -------------------------------------------------------------------------

    async def get_token_info(self, token_address: str) -> TokenState:
        return await self._fetch(TokenState, "info", {"tokenAddress": token_address})

    async def get_balance(
        self,
        address: str,
        *,
        token_address: Optional[str] = None,
        token_id: Optional[str] = None,
    ) -> BalanceResponse:
        req = BalanceRequest(address=address, token_address=token_address, token_id=token_id)
        return await self._fetch(BalanceResponse, "balance", req.to_body())

    async def get_nft_info(self, contract_address: str, nft_address: str) -> NFTInfo:
        return await self._fetch(NFTInfo, "nft", {"contractAddress": contract_address, "nftAddress": nft_address})

    async def get_nonce(self, address: str) -> NonceResponse:
        return await self._fetch(NonceResponse, "nonce", {"address": address})

    async def faucet(self, address: str) -> FaucetResponse:
        return await self._fetch(FaucetResponse, "faucet", {"address": address})

    async def tx_status(self, hash: str) -> TransactionStatus:
        return await self._fetch(TransactionStatus, "tx-status", {"hash": hash})

    async def get_proof(self, job_id: str) -> JobResult:
        return await self._fetch(JobResult, "result", {"jobId": job_id})

    # -------------------------------------------------------------------------
    # Build
    # -------------------------------------------------------------------------

    async def build(self, endpoint: str, params: Mapping[str, Any]) -> JsonDict:
        """Call any build endpoint with a raw body."""
        return await self.call(endpoint, params)

    async def launch_token(self, **params: Any) -> TransactionPayload:
        req = LaunchTokenParams(**params)
        return await self._fetch(TransactionPayload, "deploy", req.to_body())

    async def token_transaction(self, tx_type: str, **params: Any) -> TransactionPayload:
        req = TokenTransactionParams(tx_type=tx_type, **params)
        return await self._fetch(TransactionPayload, "transaction", req.to_body())

    async def mint_tokens(self, **params: Any) -> TransactionPayload:
        return await self.token_transaction("mint", **params)

    async def transfer_tokens(self, **params: Any) -> TransactionPayload:
        return await self.token_transaction("transfer", **params)

    async def token_offer(self, **params: Any) -> TransactionPayload:
        return await self.token_transaction("offer", **params)

    async def token_bid(self, **params: Any) -> TransactionPayload:
        return await self.token_transaction("bid", **params)

    async def buy_tokens(self, **params: Any) -> TransactionPayload:
        return await self.token_transaction("buy", **params)

    async def sell_tokens(self, **params: Any) -> TransactionPayload:
        return await self.token_transaction("sell", **params)

    async def withdraw_token_offer(self, **params: Any) -> TransactionPayload:
        return await self.token_transaction("withdraw-offer", **params)

    async def withdraw_token_bid(self, **params: Any) -> TransactionPayload:
        return await self.token_transaction("withdraw-bid", **params)

    async def airdrop_tokens(
        self,
        *,
        sender: str,
        token_address: str,
        recipients: Sequence[Union[AirdropRecipient, Mapping[str, Any]]],
        nonce: Optional[int] = None,
    ) -> BatchTransactions:
        req = AirdropParams(
            sender=sender,
            token_address=token_address,
            recipients=[r if isinstance(r, AirdropRecipient) else AirdropRecipient(**r) for r in recipients],
            nonce=nonce,
        )
        return await self._fetch(BatchTransactions, "airdrop", req.to_body())

    async def launch_nft_collection(self, **params: Any) -> TransactionPayload:
        req = NftCollectionParams(**params)
        return await self._fetch(TransactionPayload, "nft-launch", req.to_body())

    async def mint_nft(self, **params: Any) -> TransactionPayload:
        req = NftMintParams(**params)
        return await self._fetch(TransactionPayload, "nft-mint", req.to_body())

    async def transfer_nft(self, **params: Any) -> TransactionPayload:
        req = NftTransferParams(**params)
        return await self._fetch(TransactionPayload, "nft-transfer", req.to_body())

    # -------------------------------------------------------------------------
    # Prove
    # -------------------------------------------------------------------------

    async def prove(
        self,
        *,
        tx: Optional[TxLike] = None,
        signed_data: Optional[str] = None,
        txs: Optional[Sequence[SignedTransaction]] = None,
    ) -> JobId:
        """
        Submit signed transaction(s) for proving. Pass either ``tx`` and
        ``signed_data`` for one transaction, or ``txs`` for a batch.
        """
        if txs is not None:
            if tx is not None or signed_data is not None:
                raise ConfigError("pass either tx/signed_data or txs, not both")
            if not txs:
                raise ConfigError("txs must not be empty")
            req = ProveRequest(txs=list(txs))
        else:
            if tx is None or not signed_data:
                raise ConfigError("tx and signed_data are required")
            req = ProveRequest(tx=_as_payload(tx), signed_data=signed_data)
        job = await self._fetch(JobId, "prove", req.to_body())
        if not job.job_id:
            raise ApiError(endpoint="prove", message="service did not return a jobId")
        return job

    # -------------------------------------------------------------------------
    # Waiting
    # -------------------------------------------------------------------------

    async def wait_for_job(self, job_id: str) -> JobOutcome:
        return await self._jobs.wait(job_id)

    async def wait_for_proofs(self, job_id: str) -> Optional[List[str]]:
        return await self._jobs.wait_for_proofs(job_id)

    async def wait_for_job_result(self, job_id: str) -> Optional[str]:
        return await self._jobs.wait_for_job_result(job_id)

    async def wait_for_transaction(self, hash: str) -> InclusionResult:
        return await self._watcher.wait(hash)


__all__ = ["MinaTokensAPI"]
