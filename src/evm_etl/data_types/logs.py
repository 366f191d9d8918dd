from pydantic import BaseModel
from typing import List


class Log(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
    }

    address: str
    block_hash: str
    block_number: int
    data: str
    log_index: int
    removed: bool
    topics: List[str]
    transaction_hash: str
    transaction_index: int
