from pydantic import BaseModel
from datetime import datetime, date
from typing import List, Optional


class Block(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
    }

    base_fee_per_gas: Optional[int] = None  # absent before London
    block_time: datetime
    block_date: date
    difficulty: int
    extra_data: Optional[str] = None
    gas_limit: int
    gas_used: int
    hash: str
    logs_bloom: Optional[str] = None
    miner: Optional[str] = None
    mix_hash: Optional[str] = None
    nonce: Optional[str] = None
    number: int
    parent_hash: Optional[str] = None
    receipts_root: Optional[str] = None
    sha3_uncles: Optional[str] = None
    size: int
    state_root: Optional[str] = None
    total_difficulty: Optional[int] = None
    transactions: List[str] = []
    transactions_root: Optional[str] = None
    uncles: List[str] = []
