import json

import httpx
import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from token_swap.client import FeeRelayerClient
from token_swap.models import RelayedSwapParams, SwapPoolSvm
from token_swap.models.base import FeeRelayerClientException


def make_pool_model() -> SwapPoolSvm:
    return SwapPoolSvm(
        address=Pubkey.new_unique(),
        swap_program=Pubkey.new_unique(),
        authority=Pubkey.new_unique(),
        token_account_a=Pubkey.new_unique(),
        token_account_b=Pubkey.new_unique(),
        mint_a=Pubkey.new_unique(),
        mint_b=Pubkey.new_unique(),
        pool_mint=Pubkey.new_unique(),
        fee_account=Pubkey.new_unique(),
    )


@pytest.fixture
def params():
    return RelayedSwapParams(
        source_token=Pubkey.new_unique(),
        destination_token=Pubkey.new_unique(),
        source_token_mint=Pubkey.new_unique(),
        destination_token_mint=Pubkey.new_unique(),
        user_authority=Pubkey.new_unique(),
        pool=make_pool_model(),
        amount=10,
        min_amount_out=18,
        fee_compensation_pool=make_pool_model(),
        fee_amount=15000,
        fee_min_amount_out=14000,
        fee_payer_wsol_account_keypair=str(Keypair()),
        signature=Signature.new_unique(),
        blockhash=Hash.new_unique(),
    )


def relayer(handler) -> FeeRelayerClient:
    return FeeRelayerClient(
        "https://relayer.example.com",
        http_options={"transport": httpx.MockTransport(handler)},
    )


def test_invalid_server_url():
    with pytest.raises(ValueError):
        FeeRelayerClient("ftp://relayer.example.com")


async def test_get_fee_payer():
    fee_payer = Pubkey.new_unique()
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text=f'"{fee_payer}"\n')

    assert await relayer(handler).get_fee_payer() == str(fee_payer)
    (request,) = requests
    assert request.method == "GET"
    assert request.url.path == "/fee_payer/pubkey"


async def test_swap_token(params):
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json="5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnb")

    signature = await relayer(handler).swap_token(params)

    assert signature == "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnb"
    ((path, body),) = bodies
    assert path == "/swap_spl_token_with_fee_compensation"
    assert body["amount"] == "10"
    assert body["fee_amount"] == "15000"
    assert body["source_token"] == str(params.source_token)
    assert body["pool"]["mint_a"] == str(params.pool.mint_a)
    assert body["signature"] == str(params.signature)
    assert body["blockhash"] == str(params.blockhash)
    assert RelayedSwapParams.model_validate(body) == params


async def test_swap_token_error_payload(params):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": 6, "message": "Invalid signature"})

    with pytest.raises(FeeRelayerClientException, match="Invalid signature"):
        await relayer(handler).swap_token(params)


async def test_swap_token_http_error(params):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(httpx.HTTPStatusError):
        await relayer(handler).swap_token(params)
