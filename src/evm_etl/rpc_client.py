import asyncio
import itertools
import time
from aiohttp import ClientError, ClientResponseError, ClientSession, ClientTimeout
from loguru import logger
from pydantic import ValidationError
from typing import Any, List, Optional

from .errors import ProtocolError, TransportError
from .metrics import RPC_ERRORS, RPC_LATENCY, RPC_REQUESTS
from .rpc_types import RawBlock, RawReceipt
from .utils import int_to_hex


class RPCClient:
    """Minimal JSON-RPC 2.0 client for a single EVM node

    Results are returned still hex-encoded. Every failure surfaces as a
    FetchError subclass: TransportError when the node could not be reached or
    answered with a non-2xx status, ProtocolError when the answer is not a
    usable result. Nothing is retried.
    """

    def __init__(self, rpc_url: str, timeout: float = 30.0, session: Optional[ClientSession] = None) -> None:
        logger.info(f"Initializing RPC client with URL: {rpc_url}")
        self.rpc_url = rpc_url
        self.timeout = ClientTimeout(total=timeout)
        self._session = session
        self._request_ids = itertools.count(1)

    async def __aenter__(self) -> "RPCClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()

    def _get_session(self) -> ClientSession:
        if self._session is None or self._session.closed:
            self._session = ClientSession(timeout=self.timeout)
        return self._session

    async def call(self, method: str, params: List[Any]) -> Any:
        """Issue one JSON-RPC request and unwrap its result field"""
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params,
        }
        start_time = time.time()
        RPC_REQUESTS.labels(method=method).inc()
        try:
            async with self._get_session().post(self.rpc_url, json=payload, timeout=self.timeout) as response:
                response.raise_for_status()
                data = await response.json(content_type=None)
        except ClientResponseError as e:
            RPC_ERRORS.labels(method=method).inc()
            raise TransportError(method, f"HTTP {e.status} {e.message}") from e
        except (ClientError, asyncio.TimeoutError) as e:
            RPC_ERRORS.labels(method=method).inc()
            raise TransportError(method, f"{type(e).__name__}: {str(e)}") from e
        except ValueError as e:
            RPC_ERRORS.labels(method=method).inc()
            raise ProtocolError(method, f"Response is not valid JSON: {str(e)}") from e
        finally:
            RPC_LATENCY.labels(method=method).observe(time.time() - start_time)

        if not isinstance(data, dict) or "result" not in data:
            RPC_ERRORS.labels(method=method).inc()
            error = data.get("error") if isinstance(data, dict) else data
            raise ProtocolError(method, f"No result field in response: {error}")

        if data["result"] is None:
            RPC_ERRORS.labels(method=method).inc()
            raise ProtocolError(method, f"Node returned null for params {params}")

        return data["result"]

    async def fetch_block(self, block_number: int) -> RawBlock:
        method = "eth_getBlockByNumber"
        logger.debug(f"Fetching block with number: {block_number}")
        result = await self.call(method, [int_to_hex(block_number), True])
        try:
            return RawBlock.model_validate(result)
        except ValidationError as e:
            RPC_ERRORS.labels(method=method).inc()
            raise ProtocolError(method, f"Unexpected block shape for {block_number}: {str(e)}") from e

    async def fetch_receipts(self, block_number: int) -> List[RawReceipt]:
        method = "eth_getBlockReceipts"
        logger.debug(f"Fetching receipts for block: {block_number}")
        result = await self.call(method, [int_to_hex(block_number)])
        if not isinstance(result, list):
            RPC_ERRORS.labels(method=method).inc()
            raise ProtocolError(method, f"Expected a list of receipts for {block_number}, got {type(result).__name__}")
        try:
            return [RawReceipt.model_validate(receipt) for receipt in result]
        except ValidationError as e:
            RPC_ERRORS.labels(method=method).inc()
            raise ProtocolError(method, f"Unexpected receipt shape for {block_number}: {str(e)}") from e
