from dataclasses import dataclass
from datetime import datetime
from loguru import logger
from typing import List, NamedTuple, Optional

from ..data_types import Block, Receipt, Transaction
from ..rpc_types import RawBlock, RawReceipt
from ..utils import hex_to_int
from .blocks import BlockParser, parse_block_time
from .receipts import ReceiptParser
from .transactions import TransactionParser


@dataclass
class BlockData:
    block: Block
    transactions: List[Transaction]
    receipts: List[Receipt]


class BlockRef(NamedTuple):
    hash: str
    block_time: datetime


def normalize_block_data(raw_block: RawBlock, raw_receipts: Optional[List[RawReceipt]] = None) -> BlockData:
    """Convert one raw block and its raw receipts into normalized records

    The block timestamp is decoded once. Transactions and receipts look their
    block up by height and reuse that exact value, so all three entity kinds
    agree on the block time.

    Args:
        raw_block (RawBlock): Block fetched with full transactions
        raw_receipts (List[RawReceipt] | None): Receipts of the block, None if
            they could not be fetched

    Returns:
        BlockData: The normalized block, transactions and receipts
    """
    block_time = parse_block_time(raw_block.timestamp)
    block = Block(**BlockParser.parse_raw(raw_block, block_time))

    block_refs: dict[int, BlockRef] = {block.number: BlockRef(block.hash, block_time)}

    def resolve(raw_number: Optional[str], kind: str, key: str) -> tuple[int, BlockRef]:
        number = hex_to_int(raw_number) if raw_number is not None else block.number
        ref = block_refs.get(number)
        if ref is None:
            logger.warning(f"{kind} {key} references block {number}, expected {block.number}")
            return block.number, block_refs[block.number]
        return number, ref

    transactions = []
    for raw_tx in raw_block.transactions:
        number, ref = resolve(raw_tx.block_number, "Transaction", raw_tx.hash)
        transactions.append(Transaction(**TransactionParser.parse_raw(raw_tx, ref.hash, number, ref.block_time)))

    receipts = []
    for raw_receipt in raw_receipts or []:
        number, ref = resolve(raw_receipt.block_number, "Receipt", raw_receipt.transaction_hash)
        receipts.append(Receipt(**ReceiptParser.parse_raw(raw_receipt, ref.hash, number, ref.block_time)))

    return BlockData(block=block, transactions=transactions, receipts=receipts)
