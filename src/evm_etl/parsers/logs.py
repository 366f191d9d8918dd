from ..rpc_types import RawLog
from ..utils import hex_to_int


class LogParser:
    @staticmethod
    def parse_raw(raw_log: RawLog, block_hash: str, block_number: int, transaction_hash: str) -> dict:
        return {
            'address': raw_log.address,
            'block_hash': raw_log.block_hash or block_hash,
            'block_number': hex_to_int(raw_log.block_number) if raw_log.block_number is not None else block_number,
            'data': raw_log.data,
            'log_index': hex_to_int(raw_log.log_index),
            'removed': raw_log.removed,
            'topics': list(raw_log.topics),
            'transaction_hash': raw_log.transaction_hash or transaction_hash,
            'transaction_index': hex_to_int(raw_log.transaction_index),
        }
