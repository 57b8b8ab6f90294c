import json

import httpx
import pytest
import respx

from minatokens_sdk.api.client import MinaTokensAPI
from minatokens_sdk.api.http import ApiTransport
from minatokens_sdk.config import SDKConfig
from minatokens_sdk.errors import ApiError, ConfigError
from minatokens_sdk.types import BatchTransactions

pytestmark = pytest.mark.anyio

BASE = "https://minatokens.com/api/v1"


async def _no_sleep(_s):
    return None


@pytest.fixture
def config():
    return SDKConfig(
        api_key="test-key",
        chain="devnet",
        job_poll_interval=0,
        tx_poll_interval=0,
        job_max_errors=3,
        tx_max_errors=3,
    )


async def test_call_posts_json_with_api_key(config):
    with respx.mock:
        route = respx.post(f"{BASE}/tx-status").mock(
            return_value=httpx.Response(200, json={"hash": "h", "status": "pending"})
        )
        async with ApiTransport(config) as transport:
            data = await transport.call("tx-status", {"hash": "h"})

    assert data == {"hash": "h", "status": "pending"}
    request = route.calls.last.request
    assert request.headers["x-api-key"] == "test-key"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"hash": "h"}


async def test_zeko_uses_its_own_base_url():
    cfg = SDKConfig(api_key="k", chain="zeko")
    with respx.mock:
        route = respx.post("https://zekotokens.com/api/v1/nonce").mock(
            return_value=httpx.Response(200, json={"address": "B62q", "nonce": 3})
        )
        async with MinaTokensAPI(cfg) as api:
            res = await api.get_nonce("B62q")
    assert res.nonce == 3
    assert route.called


async def test_non_2xx_raises_api_error_with_service_text(config):
    with respx.mock:
        respx.post(f"{BASE}/info").mock(return_value=httpx.Response(400, json={"error": "Invalid token address"}))
        async with ApiTransport(config) as transport:
            with pytest.raises(ApiError) as ei:
                await transport.call("info", {"tokenAddress": "nope"})

    err = ei.value
    assert err.status == 400
    assert err.endpoint == "info"
    assert "Invalid token address" in err.message
    assert not err.is_transport


async def test_network_error_raises_transport_api_error(config):
    with respx.mock:
        respx.post(f"{BASE}/info").mock(side_effect=httpx.ConnectError("connection refused"))
        async with ApiTransport(config) as transport:
            with pytest.raises(ApiError) as ei:
                await transport.call("info", {})
    assert ei.value.is_transport
    assert ei.value.status is None


async def test_non_json_reply_raises(config):
    with respx.mock:
        respx.post(f"{BASE}/info").mock(return_value=httpx.Response(200, text="<html>"))
        async with ApiTransport(config) as transport:
            with pytest.raises(ApiError):
                await transport.call("info", {})


async def test_malformed_model_reply_becomes_api_error(config):
    with respx.mock:
        respx.post(f"{BASE}/tx-status").mock(return_value=httpx.Response(200, json={"error": "not found"}))
        async with MinaTokensAPI(config) as api:
            with pytest.raises(ApiError) as ei:
                await api.tx_status("h")
    assert ei.value.message == "not found"


async def test_job_poller_survives_gateway_errors(config):
    with respx.mock:
        route = respx.post(f"{BASE}/result").mock(
            side_effect=[
                httpx.Response(503, json={"error": "busy"}),
                httpx.Response(200, json={"jobStatus": "started"}),
                httpx.Response(200, json={"jobStatus": "used", "hash": "5Jh1"}),
            ]
        )
        async with MinaTokensAPI(config, sleep=_no_sleep) as api:
            hashes = await api.wait_for_proofs("job-1")

    assert hashes == ["5Jh1"]
    assert route.call_count == 3
    assert json.loads(route.calls.last.request.content) == {"jobId": "job-1"}


async def test_wait_for_transaction_over_http(config):
    with respx.mock:
        respx.post(f"{BASE}/tx-status").mock(
            side_effect=[
                httpx.Response(200, json={"hash": "h", "status": "pending"}),
                httpx.Response(200, json={"hash": "h", "status": "applied", "details": {"blockHeight": 9}}),
            ]
        )
        async with MinaTokensAPI(config, sleep=_no_sleep) as api:
            res = await api.wait_for_transaction("h")
    assert res.details == {"blockHeight": 9}


async def test_airdrop_request_body(config):
    with respx.mock:
        route = respx.post(f"{BASE}/airdrop").mock(
            return_value=httpx.Response(200, json={"txs": [{"minaSignerPayload": {"a": 1}}]})
        )
        async with MinaTokensAPI(config) as api:
            batch = await api.airdrop_tokens(
                sender="B62qSender",
                token_address="B62qToken",
                recipients=[{"address": "B62qA", "amount": 10}],
            )
    assert isinstance(batch, BatchTransactions)
    assert json.loads(route.calls.last.request.content) == {
        "sender": "B62qSender",
        "tokenAddress": "B62qToken",
        "recipients": [{"address": "B62qA", "amount": 10}],
    }


async def test_transfer_sets_tx_type(config):
    with respx.mock:
        route = respx.post(f"{BASE}/transaction").mock(
            return_value=httpx.Response(200, json={"minaSignerPayload": {"a": 1}, "serializedTransaction": "s"})
        )
        async with MinaTokensAPI(config) as api:
            tx = await api.transfer_tokens(sender="B62qS", token_address="B62qT", to="B62qR", amount=5)
    assert tx.signer_payload == {"a": 1}
    assert json.loads(route.calls.last.request.content)["txType"] == "transfer"


async def test_prove_requires_job_id(config):
    with respx.mock:
        respx.post(f"{BASE}/prove").mock(return_value=httpx.Response(200, json={"jobId": ""}))
        async with MinaTokensAPI(config) as api:
            with pytest.raises(ApiError):
                await api.prove(tx={"minaSignerPayload": {}}, signed_data="sig")


async def test_prove_argument_combinations(config):
    api = MinaTokensAPI(config)
    with pytest.raises(ConfigError):
        await api.prove()
    with pytest.raises(ConfigError):
        await api.prove(txs=[])


async def test_read_endpoints_send_camel_case_bodies(config):
    with respx.mock:
        balance = respx.post(f"{BASE}/balance").mock(
            return_value=httpx.Response(200, json={"address": "B62qH", "balance": 1000})
        )
        nft = respx.post(f"{BASE}/nft").mock(
            return_value=httpx.Response(200, json={"name": "Rare", "owner": "B62qO", "extra": 1})
        )
        async with MinaTokensAPI(config) as api:
            bal = await api.get_balance("B62qH", token_address="B62qT")
            info = await api.get_nft_info("B62qC", "B62qN")

    assert bal.balance == 1000
    assert json.loads(balance.calls.last.request.content) == {"tokenAddress": "B62qT", "address": "B62qH"}
    assert info.name == "Rare"
    assert json.loads(nft.calls.last.request.content) == {"contractAddress": "B62qC", "nftAddress": "B62qN"}


async def test_call_starts_client_on_first_use(config):
    transport = ApiTransport(config)
    with respx.mock:
        respx.post(f"{BASE}/nonce").mock(return_value=httpx.Response(200, json={"address": "B62q", "nonce": 1}))
        assert await transport.call("nonce", {"address": "B62q"}) == {"address": "B62q", "nonce": 1}
    await transport.aclose()
