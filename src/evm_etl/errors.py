class EtlError(Exception):
    """Base class for all pipeline errors"""


class FetchError(EtlError):
    """Fetching a block or its receipts from the RPC node failed"""

    def __init__(self, method: str, message: str) -> None:
        super().__init__(f"{method}: {message}")
        self.method = method


class TransportError(FetchError):
    """The RPC endpoint could not be reached or answered with a non-2xx status"""


class ProtocolError(FetchError):
    """The RPC response is not a usable JSON-RPC result"""


class StoreError(EtlError):
    """The destination store rejected a batch"""

    def __init__(self, table_id: str, message: str) -> None:
        super().__init__(f"Failed to write to table {table_id}: {message}")
        self.table_id = table_id
