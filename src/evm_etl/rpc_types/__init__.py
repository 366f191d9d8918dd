from .blocks import RawBlock
from .logs import RawLog
from .receipts import RawReceipt
from .transactions import RawTransaction

__all__ = ["RawBlock", "RawLog", "RawReceipt", "RawTransaction"]
