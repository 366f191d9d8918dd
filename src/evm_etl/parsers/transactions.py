from datetime import datetime

from ..rpc_types import RawTransaction
from ..utils import hex_to_int


class TransactionParser:
    @staticmethod
    def parse_raw(raw_tx: RawTransaction, block_hash: str, block_number: int, block_time: datetime) -> dict:
        """Parse a transaction embedded in its block, inheriting the block's time"""
        return {
            'block_hash': block_hash,
            'block_number': block_number,
            'block_time': block_time,
            'block_date': block_time.date(),
            'chain_id': hex_to_int(raw_tx.chain_id) if raw_tx.chain_id is not None else None,
            'from_address': raw_tx.from_address,
            'gas': hex_to_int(raw_tx.gas),
            'gas_price': hex_to_int(raw_tx.gas_price),
            'hash': raw_tx.hash,
            'input': raw_tx.input or '0x',
            'max_fee_per_gas': hex_to_int(raw_tx.max_fee_per_gas) if raw_tx.max_fee_per_gas is not None else None,
            'max_priority_fee_per_gas': hex_to_int(raw_tx.max_priority_fee_per_gas) if raw_tx.max_priority_fee_per_gas is not None else None,
            'nonce': hex_to_int(raw_tx.nonce),
            'r': raw_tx.r,
            's': raw_tx.s,
            'to_address': raw_tx.to_address,
            'transaction_index': hex_to_int(raw_tx.transaction_index),
            'type': hex_to_int(raw_tx.type),
            'v': raw_tx.v,
            'value': hex_to_int(raw_tx.value),
        }
