from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class RawLog(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    address: str
    block_hash: Optional[str] = Field(default=None, alias="blockHash")
    block_number: Optional[str] = Field(default=None, alias="blockNumber")
    data: str = "0x"
    log_index: Optional[str] = Field(default=None, alias="logIndex")
    removed: bool = False
    topics: List[str] = []
    transaction_hash: Optional[str] = Field(default=None, alias="transactionHash")
    transaction_index: Optional[str] = Field(default=None, alias="transactionIndex")
