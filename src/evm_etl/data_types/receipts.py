from pydantic import BaseModel
from datetime import datetime, date
from typing import List, Optional

from .logs import Log


class Receipt(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
    }

    block_hash: str
    block_number: int
    block_time: datetime
    block_date: date
    contract_address: Optional[str] = None
    cumulative_gas_used: int
    effective_gas_price: int
    from_address: Optional[str] = None
    gas_used: int
    logs: List[Log] = []
    logs_bloom: Optional[str] = None
    status: bool
    to_address: Optional[str] = None
    transaction_hash: str
    transaction_index: int
    type: int
