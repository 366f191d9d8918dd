import asyncio
import time
from loguru import logger
from pydantic import BaseModel
from typing import Callable, Dict, Iterable, List, Optional

from .data_manager import BaseDataManager
from .data_types import TABLE_MODELS
from .errors import StoreError
from .metrics import FLUSH_LATENCY, ROWS_FLUSHED


class TableBuffer:
    """Rows waiting to be written to one table"""

    def __init__(self, table_id: str, max_rows: int, max_seconds: float, clock: Callable[[], float]) -> None:
        self.table_id = table_id
        self.max_rows = max_rows
        self.max_seconds = max_seconds
        self.clock = clock
        self.rows: List[BaseModel] = []
        self.last_flush = clock()
        self.written = 0

    def __len__(self) -> int:
        return len(self.rows)

    def should_flush(self) -> bool:
        if not self.rows:
            return False
        return len(self.rows) >= self.max_rows or self.clock() - self.last_flush >= self.max_seconds


class BatchWriter:
    """Buffers normalized rows per table and writes them in batches

    A table is flushed when its buffer reaches `max_rows` rows or when
    `max_seconds` have passed since its last flush. Each flush is a single
    `load_table` call on the data manager. Nothing is flushed implicitly:
    callers must await `flush()` at the end of a run.

    Failed flushes are not retried. The rows of that batch are dropped and
    the failure is raised as StoreError.
    """

    def __init__(
        self,
        data_manager: BaseDataManager,
        max_rows: int = 1000,
        max_seconds: float = 20.0,
        tables: Optional[Iterable[str]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_rows < 1:
            raise ValueError(f"max_rows must be at least 1, got {max_rows}")
        self.data_manager = data_manager
        if not data_manager.supports_batching:
            max_rows = 1
        self.buffers: Dict[str, TableBuffer] = {
            table_id: TableBuffer(table_id, max_rows, max_seconds, clock)
            for table_id in (tables or TABLE_MODELS)
        }

    def is_active(self, table_id: str) -> bool:
        return table_id in self.buffers

    def pending(self, table_id: str) -> int:
        return len(self._buffer(table_id))

    @property
    def written(self) -> Dict[str, int]:
        return {table_id: buffer.written for table_id, buffer in self.buffers.items()}

    def _buffer(self, table_id: str) -> TableBuffer:
        try:
            return self.buffers[table_id]
        except KeyError:
            raise ValueError(f"Table {table_id} is not managed by this writer") from None

    async def write(self, table_id: str, row: BaseModel) -> int:
        """Buffer one row, flushing the table if a threshold is reached

        Returns:
            int: Number of rows flushed by this call (0 if nothing was flushed)
        """
        buffer = self._buffer(table_id)
        buffer.rows.append(row)
        if buffer.should_flush():
            return await self._flush_buffer(buffer)
        return 0

    async def flush(self, table_id: Optional[str] = None) -> int:
        """Write all buffered rows of one table, or of every table

        Every table is attempted even if an earlier one fails; the first
        StoreError is raised once all buffers have been handed to the store.

        Returns:
            int: Number of rows written
        """
        if table_id is not None:
            return await self._flush_buffer(self._buffer(table_id))

        total = 0
        first_error: Optional[StoreError] = None
        for buffer in self.buffers.values():
            try:
                total += await self._flush_buffer(buffer)
            except StoreError as e:
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error
        return total

    async def _flush_buffer(self, buffer: TableBuffer) -> int:
        rows, buffer.rows = buffer.rows, []
        if not rows:
            buffer.last_flush = buffer.clock()
            return 0

        start_time = time.time()
        try:
            await asyncio.to_thread(self.data_manager.load_table, rows, buffer.table_id)
        except Exception as e:
            logger.error(f"Failed to flush {len(rows)} rows to table {buffer.table_id}: {type(e).__name__}: {str(e)}")
            raise StoreError(buffer.table_id, f"{type(e).__name__}: {str(e)}") from e
        finally:
            buffer.last_flush = buffer.clock()

        duration = time.time() - start_time
        FLUSH_LATENCY.labels(table=buffer.table_id).observe(duration)
        ROWS_FLUSHED.labels(table=buffer.table_id).inc(len(rows))
        buffer.written += len(rows)
        logger.debug(f"Flushed {len(rows)} rows to table {buffer.table_id} in {duration:.2f} seconds")
        return len(rows)
