from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .transactions import RawTransaction


class RawBlock(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    base_fee_per_gas: Optional[str] = Field(default=None, alias="baseFeePerGas")
    difficulty: Optional[str] = None
    extra_data: Optional[str] = Field(default=None, alias="extraData")
    gas_limit: Optional[str] = Field(default=None, alias="gasLimit")
    gas_used: Optional[str] = Field(default=None, alias="gasUsed")
    hash: str
    logs_bloom: Optional[str] = Field(default=None, alias="logsBloom")
    miner: Optional[str] = None
    mix_hash: Optional[str] = Field(default=None, alias="mixHash")
    nonce: Optional[str] = None
    number: str
    parent_hash: Optional[str] = Field(default=None, alias="parentHash")
    receipts_root: Optional[str] = Field(default=None, alias="receiptsRoot")
    sha3_uncles: Optional[str] = Field(default=None, alias="sha3Uncles")
    size: Optional[str] = None
    state_root: Optional[str] = Field(default=None, alias="stateRoot")
    timestamp: str
    total_difficulty: Optional[str] = Field(default=None, alias="totalDifficulty")
    transactions: List[RawTransaction] = []
    transactions_root: Optional[str] = Field(default=None, alias="transactionsRoot")
    uncles: List[str] = []
