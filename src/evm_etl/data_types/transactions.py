from pydantic import BaseModel
from datetime import datetime, date
from typing import Optional


class Transaction(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
    }

    block_hash: str
    block_number: int
    block_time: datetime
    block_date: date
    chain_id: Optional[int] = None
    from_address: str
    gas: int
    gas_price: int
    hash: str
    input: str
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None
    nonce: int
    r: Optional[str] = None
    s: Optional[str] = None
    to_address: Optional[str] = None  # None for contract creation
    transaction_index: int
    type: int
    v: Optional[str] = None
    value: int
