from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class RawTransaction(BaseModel):
    """Transaction object embedded in eth_getBlockByNumber(..., true)"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    block_hash: Optional[str] = Field(default=None, alias="blockHash")
    block_number: Optional[str] = Field(default=None, alias="blockNumber")
    chain_id: Optional[str] = Field(default=None, alias="chainId")
    from_address: str = Field(alias="from")
    gas: Optional[str] = None
    gas_price: Optional[str] = Field(default=None, alias="gasPrice")
    hash: str
    input: Optional[str] = None
    max_fee_per_gas: Optional[str] = Field(default=None, alias="maxFeePerGas")
    max_priority_fee_per_gas: Optional[str] = Field(default=None, alias="maxPriorityFeePerGas")
    nonce: Optional[str] = None
    r: Optional[str] = None
    s: Optional[str] = None
    to_address: Optional[str] = Field(default=None, alias="to")
    transaction_index: Optional[str] = Field(default=None, alias="transactionIndex")
    type: Optional[str] = None
    v: Optional[str] = None
    value: Optional[str] = None
