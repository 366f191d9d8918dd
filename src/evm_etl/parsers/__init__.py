from .blocks import BlockParser, parse_block_time
from .logs import LogParser
from .normalizer import BlockData, normalize_block_data
from .receipts import ReceiptParser
from .transactions import TransactionParser

__all__ = [
    "BlockData",
    "BlockParser",
    "LogParser",
    "ReceiptParser",
    "TransactionParser",
    "normalize_block_data",
    "parse_block_time",
]
