import asyncio
from typing import Dict, Generator, List, Optional, Sequence

import pytest
from aioresponses import aioresponses
from pydantic import BaseModel

from evm_etl.data_manager import BaseDataManager
from evm_etl.errors import ProtocolError
from evm_etl.rpc_types import RawBlock, RawReceipt

RPC_URL = "http://node.test:8545"

BLOCK_HASH = "0x" + "ab" * 32
TX_HASH_0 = "0x" + "01" * 32
TX_HASH_1 = "0x" + "02" * 32
SENDER = "0x" + "aa" * 20
RECIPIENT = "0x" + "bb" * 20
CONTRACT = "0x" + "cc" * 20


def make_raw_transaction(number: int, index: int, tx_hash: str, **overrides) -> dict:
    tx = {
        "blockHash": BLOCK_HASH,
        "blockNumber": hex(number),
        "chainId": "0x1",
        "from": SENDER,
        "gas": "0x5208",
        "gasPrice": "0x3b9aca00",
        "hash": tx_hash,
        "input": "0x",
        "maxFeePerGas": "0x77359400",
        "maxPriorityFeePerGas": "0x3b9aca00",
        "nonce": "0x7",
        "r": "0x" + "11" * 32,
        "s": "0x" + "22" * 32,
        "to": RECIPIENT,
        "transactionIndex": hex(index),
        "type": "0x2",
        "v": "0x1",
        "value": "0xde0b6b3a7640000",
    }
    tx.update(overrides)
    return tx


def make_raw_block(number: int, timestamp: str = "0x60000000", transactions: Optional[List[dict]] = None, **overrides) -> dict:
    transactions = transactions if transactions is not None else []
    block = {
        "baseFeePerGas": "0x7",
        "difficulty": "0x5",
        "extraData": "0x",
        "gasLimit": "0x1c9c380",
        "gasUsed": "0xa410",
        "hash": BLOCK_HASH,
        "logsBloom": "0x" + "00" * 256,
        "miner": "0x" + "dd" * 20,
        "mixHash": "0x" + "ee" * 32,
        "nonce": "0x0000000000000000",
        "number": hex(number),
        "parentHash": "0x" + "ff" * 32,
        "receiptsRoot": "0x" + "12" * 32,
        "sha3Uncles": "0x" + "13" * 32,
        "size": "0x220",
        "stateRoot": "0x" + "14" * 32,
        "timestamp": timestamp,
        "totalDifficulty": "0xc70d815d562d3cfa955",
        "transactions": transactions,
        "transactionsRoot": "0x" + "15" * 32,
        "uncles": [],
    }
    block.update(overrides)
    return block


def make_raw_receipt(number: int, index: int, tx_hash: str, status: str = "0x1", logs: Optional[List[dict]] = None, **overrides) -> dict:
    receipt = {
        "blockHash": BLOCK_HASH,
        "blockNumber": hex(number),
        "contractAddress": None,
        "cumulativeGasUsed": hex(21000 * (index + 1)),
        "effectiveGasPrice": "0x3b9aca07",
        "from": SENDER,
        "gasUsed": "0x5208",
        "logs": logs if logs is not None else [],
        "logsBloom": "0x" + "00" * 256,
        "status": status,
        "to": RECIPIENT,
        "transactionHash": tx_hash,
        "transactionIndex": hex(index),
        "type": "0x2",
    }
    receipt.update(overrides)
    return receipt


def make_raw_log(number: int, tx_hash: str, log_index: int = 0) -> dict:
    return {
        "address": CONTRACT,
        "blockHash": BLOCK_HASH,
        "blockNumber": hex(number),
        "data": "0x" + "00" * 31 + "01",
        "logIndex": hex(log_index),
        "removed": False,
        "topics": ["0x" + "ddf252ad" * 8],
        "transactionHash": tx_hash,
        "transactionIndex": "0x0",
    }


@pytest.fixture
def raw_block_with_transactions() -> dict:
    return make_raw_block(
        100,
        transactions=[
            make_raw_transaction(100, 0, TX_HASH_0),
            make_raw_transaction(100, 1, TX_HASH_1, to=None, maxFeePerGas=None, maxPriorityFeePerGas=None, type="0x0"),
        ],
    )


@pytest.fixture
def raw_receipts() -> List[dict]:
    return [
        make_raw_receipt(100, 0, TX_HASH_0, logs=[make_raw_log(100, TX_HASH_0)]),
        make_raw_receipt(100, 1, TX_HASH_1, status="0x0", contractAddress=CONTRACT, to=None),
    ]


@pytest.fixture()
def mock_aiohttp() -> Generator[aioresponses, None, None]:
    with aioresponses() as mock:
        yield mock


class MemoryDataManager(BaseDataManager):
    """Keeps every loaded batch in memory"""

    def __init__(self, chain_name: str = "test", active_datasets: List[str] | None = None, **kwargs):
        self.batches: List[tuple] = []
        self.fail_tables = set(kwargs.get("fail_tables", ()))
        self.supports_batching = kwargs.get("supports_batching", True)

    def create_dataset(self, dataset_id: str, **kwargs) -> None:
        pass

    def create_table(self, table_id: str, **kwargs) -> None:
        pass

    def load_table(self, rows: Sequence[BaseModel], table_id: str, **kwargs) -> None:
        if table_id in self.fail_tables:
            raise ConnectionError(f"store unavailable for {table_id}")
        self.batches.append((table_id, list(rows)))

    def rows(self, table_id: str) -> List[BaseModel]:
        return [row for batch_table, rows in self.batches if batch_table == table_id for row in rows]


@pytest.fixture
def memory_data_manager() -> MemoryDataManager:
    return MemoryDataManager()


class FakeRPCClient:
    """Serves canned blocks and receipts keyed by height

    Heights missing from `blocks` or `receipts` fail with ProtocolError,
    the same way a node answers for an unknown block.
    """

    def __init__(self, blocks: Dict[int, dict], receipts: Dict[int, List[dict]]) -> None:
        self.blocks = blocks
        self.receipts = receipts
        self.calls: List[tuple] = []

    async def fetch_block(self, block_number: int) -> RawBlock:
        self.calls.append(("eth_getBlockByNumber", block_number))
        await asyncio.sleep(0)
        if block_number not in self.blocks:
            raise ProtocolError("eth_getBlockByNumber", f"No result field in response for {block_number}")
        return RawBlock.model_validate(self.blocks[block_number])

    async def fetch_receipts(self, block_number: int) -> List[RawReceipt]:
        self.calls.append(("eth_getBlockReceipts", block_number))
        await asyncio.sleep(0)
        if block_number not in self.receipts:
            raise ProtocolError("eth_getBlockReceipts", f"No result field in response for {block_number}")
        return [RawReceipt.model_validate(r) for r in self.receipts[block_number]]
