from datetime import datetime

from ..rpc_types import RawReceipt
from ..utils import hex_to_int, hex_to_bool
from .logs import LogParser


class ReceiptParser:
    @staticmethod
    def parse_raw(raw_receipt: RawReceipt, block_hash: str, block_number: int, block_time: datetime) -> dict:
        """Parse a receipt, inheriting the block's time. Logs stay nested."""
        return {
            'block_hash': block_hash,
            'block_number': block_number,
            'block_time': block_time,
            'block_date': block_time.date(),
            'contract_address': raw_receipt.contract_address,
            'cumulative_gas_used': hex_to_int(raw_receipt.cumulative_gas_used),
            'effective_gas_price': hex_to_int(raw_receipt.effective_gas_price),
            'from_address': raw_receipt.from_address,
            'gas_used': hex_to_int(raw_receipt.gas_used),
            'logs': [
                LogParser.parse_raw(log, block_hash, block_number, raw_receipt.transaction_hash)
                for log in raw_receipt.logs
            ],
            'logs_bloom': raw_receipt.logs_bloom,
            'status': hex_to_bool(raw_receipt.status),
            'to_address': raw_receipt.to_address,
            'transaction_hash': raw_receipt.transaction_hash,
            'transaction_index': hex_to_int(raw_receipt.transaction_index),
            'type': hex_to_int(raw_receipt.type),
        }
