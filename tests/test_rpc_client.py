import asyncio

import pytest
from aiohttp import ClientConnectionError, ClientSession
from aioresponses import aioresponses

from evm_etl.errors import FetchError, ProtocolError, TransportError
from evm_etl.rpc_client import RPCClient

from .conftest import RPC_URL, TX_HASH_0, make_raw_block, make_raw_receipt, make_raw_transaction

pytestmark = pytest.mark.asyncio


def sent_payloads(mock: aioresponses) -> list:
    return [call.kwargs["json"] for calls in mock.requests.values() for call in calls]


async def test_fetch_block_sends_hex_encoded_height(mock_aiohttp: aioresponses):
    # given
    raw_block = make_raw_block(255, transactions=[make_raw_transaction(255, 0, TX_HASH_0)])
    mock_aiohttp.post(RPC_URL, payload={"jsonrpc": "2.0", "id": 1, "result": raw_block})

    # when
    async with RPCClient(RPC_URL) as client:
        block = await client.fetch_block(255)

    # then
    payload = sent_payloads(mock_aiohttp)[0]
    assert payload["jsonrpc"] == "2.0"
    assert payload["method"] == "eth_getBlockByNumber"
    assert payload["params"] == ["0xff", True]
    assert block.number == "0xff"
    assert block.transactions[0].hash == TX_HASH_0


async def test_fetch_receipts_unwraps_result(mock_aiohttp: aioresponses):
    mock_aiohttp.post(RPC_URL, payload={"jsonrpc": "2.0", "id": 1, "result": [make_raw_receipt(16, 0, TX_HASH_0)]})

    async with RPCClient(RPC_URL) as client:
        receipts = await client.fetch_receipts(16)

    payload = sent_payloads(mock_aiohttp)[0]
    assert payload["method"] == "eth_getBlockReceipts"
    assert payload["params"] == ["0x10"]
    assert len(receipts) == 1
    assert receipts[0].transaction_hash == TX_HASH_0
    assert receipts[0].status == "0x1"


async def test_missing_result_is_a_protocol_error(mock_aiohttp: aioresponses):
    mock_aiohttp.post(RPC_URL, payload={"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "header not found"}})

    async with RPCClient(RPC_URL) as client:
        with pytest.raises(ProtocolError) as exc_info:
            await client.fetch_block(1)

    assert "header not found" in str(exc_info.value)


async def test_null_result_is_a_protocol_error(mock_aiohttp: aioresponses):
    mock_aiohttp.post(RPC_URL, payload={"jsonrpc": "2.0", "id": 1, "result": None})

    async with RPCClient(RPC_URL) as client:
        with pytest.raises(ProtocolError):
            await client.fetch_block(10 ** 9)


async def test_malformed_json_is_a_protocol_error(mock_aiohttp: aioresponses):
    mock_aiohttp.post(RPC_URL, body="<html>bad gateway</html>", content_type="text/html")

    async with RPCClient(RPC_URL) as client:
        with pytest.raises(ProtocolError):
            await client.fetch_receipts(1)


async def test_unexpected_block_shape_is_a_protocol_error(mock_aiohttp: aioresponses):
    mock_aiohttp.post(RPC_URL, payload={"jsonrpc": "2.0", "id": 1, "result": {"number": "0x1"}})

    async with RPCClient(RPC_URL) as client:
        with pytest.raises(ProtocolError):
            await client.fetch_block(1)


async def test_receipts_must_be_a_list(mock_aiohttp: aioresponses):
    mock_aiohttp.post(RPC_URL, payload={"jsonrpc": "2.0", "id": 1, "result": {"transactionHash": TX_HASH_0}})

    async with RPCClient(RPC_URL) as client:
        with pytest.raises(ProtocolError):
            await client.fetch_receipts(1)


async def test_http_error_is_a_transport_error(mock_aiohttp: aioresponses):
    mock_aiohttp.post(RPC_URL, status=502)

    async with RPCClient(RPC_URL) as client:
        with pytest.raises(TransportError):
            await client.fetch_block(1)


@pytest.mark.parametrize("exception", [ClientConnectionError(), asyncio.TimeoutError()])
async def test_network_failure_is_a_transport_error(mock_aiohttp: aioresponses, exception):
    mock_aiohttp.post(RPC_URL, exception=exception)

    async with RPCClient(RPC_URL) as client:
        with pytest.raises(TransportError):
            await client.fetch_receipts(1)


async def test_all_failures_share_one_error_kind(mock_aiohttp: aioresponses):
    mock_aiohttp.post(RPC_URL, status=500)
    mock_aiohttp.post(RPC_URL, payload={"jsonrpc": "2.0", "id": 2})

    async with RPCClient(RPC_URL) as client:
        for _ in range(2):
            with pytest.raises(FetchError):
                await client.fetch_block(1)


async def test_negative_height_is_rejected():
    async with RPCClient(RPC_URL) as client:
        with pytest.raises(ValueError):
            await client.fetch_block(-1)


async def test_timeout_applies_to_supplied_session(mock_aiohttp: aioresponses):
    mock_aiohttp.post(RPC_URL, payload={"jsonrpc": "2.0", "id": 1, "result": []})

    async with ClientSession() as session:
        client = RPCClient(RPC_URL, timeout=5, session=session)
        await client.fetch_receipts(1)

    request = next(call for calls in mock_aiohttp.requests.values() for call in calls)
    assert request.kwargs["timeout"].total == 5
