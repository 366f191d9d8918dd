from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .logs import RawLog


class RawReceipt(BaseModel):
    """One entry of the eth_getBlockReceipts result"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    block_hash: Optional[str] = Field(default=None, alias="blockHash")
    block_number: Optional[str] = Field(default=None, alias="blockNumber")
    contract_address: Optional[str] = Field(default=None, alias="contractAddress")
    cumulative_gas_used: Optional[str] = Field(default=None, alias="cumulativeGasUsed")
    effective_gas_price: Optional[str] = Field(default=None, alias="effectiveGasPrice")
    from_address: Optional[str] = Field(default=None, alias="from")
    gas_used: Optional[str] = Field(default=None, alias="gasUsed")
    logs: List[RawLog] = []
    logs_bloom: Optional[str] = Field(default=None, alias="logsBloom")
    status: Optional[str] = None
    to_address: Optional[str] = Field(default=None, alias="to")
    transaction_hash: str = Field(alias="transactionHash")
    transaction_index: Optional[str] = Field(default=None, alias="transactionIndex")
    type: Optional[str] = None
