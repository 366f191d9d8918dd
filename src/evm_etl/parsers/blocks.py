from datetime import datetime

from ..rpc_types import RawBlock
from ..utils import hex_to_int, unix_to_utc


def parse_block_time(raw_timestamp: str) -> datetime:
    """Decode the block's hex timestamp into a UTC datetime"""
    return unix_to_utc(hex_to_int(raw_timestamp), date_only=False)


class BlockParser:
    @staticmethod
    def parse_raw(raw_block: RawBlock, block_time: datetime) -> dict:
        return {
            'base_fee_per_gas': hex_to_int(raw_block.base_fee_per_gas) if raw_block.base_fee_per_gas is not None else None,
            'block_time': block_time,
            'block_date': block_time.date(),
            'difficulty': hex_to_int(raw_block.difficulty),
            'extra_data': raw_block.extra_data,
            'gas_limit': hex_to_int(raw_block.gas_limit),
            'gas_used': hex_to_int(raw_block.gas_used),
            'hash': raw_block.hash,
            'logs_bloom': raw_block.logs_bloom,
            'miner': raw_block.miner,
            'mix_hash': raw_block.mix_hash,
            'nonce': raw_block.nonce,
            'number': hex_to_int(raw_block.number),
            'parent_hash': raw_block.parent_hash,
            'receipts_root': raw_block.receipts_root,
            'sha3_uncles': raw_block.sha3_uncles,
            'size': hex_to_int(raw_block.size),
            'state_root': raw_block.state_root,
            'total_difficulty': hex_to_int(raw_block.total_difficulty) if raw_block.total_difficulty is not None else None,
            'transactions': [tx.hash for tx in raw_block.transactions],
            'transactions_root': raw_block.transactions_root,
            'uncles': list(raw_block.uncles),
        }
