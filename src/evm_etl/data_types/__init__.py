from typing import Type
from pydantic import BaseModel

from .blocks import Block
from .logs import Log
from .receipts import Receipt
from .transactions import Transaction

# Destination tables and the model stored in each
TABLE_MODELS: dict[str, Type[BaseModel]] = {
    "blocks": Block,
    "transactions": Transaction,
    "receipts": Receipt,
}

# Natural key of each table, used for file names and deduplication
TABLE_KEYS: dict[str, str] = {
    "blocks": "number",
    "transactions": "hash",
    "receipts": "transaction_hash",
}

# Columns decoded from 256-bit quantities that overflow INT64
WIDE_INT_COLUMNS = {
    "difficulty",
    "total_difficulty",
    "value",
    "gas_price",
    "max_fee_per_gas",
    "max_priority_fee_per_gas",
    "effective_gas_price",
    "base_fee_per_gas",
}

__all__ = [
    "Block",
    "Log",
    "Receipt",
    "Transaction",
    "TABLE_MODELS",
    "TABLE_KEYS",
    "WIDE_INT_COLUMNS",
]
