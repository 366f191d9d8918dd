import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from loguru import logger
from typing import Dict, List, Optional

from .batch_writer import BatchWriter
from .errors import FetchError
from .metrics import (
    BLOCKS_FAILED,
    BLOCKS_PROCESSED,
    BLOCK_PROCESSING_TIME,
    LATEST_PROCESSED_BLOCK,
)
from .parsers import BlockData, normalize_block_data
from .rpc_client import RPCClient
from .state_tracker import MissingBlockTracker


class BlockState(Enum):
    FETCHING = "fetching"
    NORMALIZING = "normalizing"
    WRITING = "writing"
    DONE = "done"
    ERRORED = "errored"


@dataclass
class RunStats:
    blocks: int = 0
    transactions: int = 0
    receipts: int = 0
    failed: List[int] = field(default_factory=list)
    receipts_missing: List[int] = field(default_factory=list)
    elapsed: float = 0.0
    deadline_hit: bool = False
    states: Dict[int, BlockState] = field(default_factory=dict)


class EVMIndexer:
    """Backfills a bounded range of block heights

    Heights are processed one after another. For each height the block and
    its receipts are fetched concurrently, normalized, and handed to the
    batch writer. A height whose block cannot be fetched or parsed is skipped;
    a height whose receipts cannot be fetched is written without receipts.
    Store failures abort the run.
    """

    def __init__(
        self,
        rpc_client: RPCClient,
        writer: BatchWriter,
        chain_name: str = "ethereum",
        print_output: bool = False,
        tracker: Optional[MissingBlockTracker] = None,
        deadline: Optional[float] = None,
    ) -> None:
        logger.info(f"Initializing EVMIndexer for chain {chain_name}")
        self.rpc_client = rpc_client
        self.writer = writer
        self.chain_name = chain_name
        self.print_output = print_output
        self.tracker = tracker
        self.deadline = deadline

    async def fetch(self, block_number: int) -> tuple:
        """Fetch the block and its receipts concurrently

        Returns:
            tuple: (block or exception, receipts or exception)
        """
        raw_block, raw_receipts = await asyncio.gather(
            self.rpc_client.fetch_block(block_number),
            self.rpc_client.fetch_receipts(block_number),
            return_exceptions=True,
        )
        for result in (raw_block, raw_receipts):
            # Cancellation is not a per-height failure
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
        return raw_block, raw_receipts

    def _mark_failed(self, block_number: int, stats: RunStats) -> BlockState:
        stats.failed.append(block_number)
        stats.states[block_number] = BlockState.ERRORED
        BLOCKS_FAILED.labels(chain=self.chain_name).inc()
        if self.tracker is not None:
            self.tracker.add_block(block_number)
        return BlockState.ERRORED

    async def process_block(self, block_number: int, stats: RunStats) -> BlockState:
        logger.info(f"Processing block {block_number}")
        block_start_time = time.time()

        stats.states[block_number] = BlockState.FETCHING
        raw_block, raw_receipts = await self.fetch(block_number)

        if isinstance(raw_block, Exception):
            if isinstance(raw_block, FetchError):
                logger.error(f"Error fetching block {block_number}: {raw_block}")
            else:
                logger.opt(exception=raw_block).error(f"Unexpected error fetching block {block_number}")
            return self._mark_failed(block_number, stats)

        if isinstance(raw_receipts, Exception):
            logger.warning(f"Receipts for block {block_number} unavailable, writing block without them: {raw_receipts}")
            stats.receipts_missing.append(block_number)
            raw_receipts = None

        if self.print_output:
            logger.info(f"Block data: {raw_block.model_dump_json(by_alias=True, indent=2)}")
            if raw_receipts is not None:
                receipts_json = ",\n".join(r.model_dump_json(by_alias=True, indent=2) for r in raw_receipts)
                logger.info(f"Block receipts: [{receipts_json}]")

        stats.states[block_number] = BlockState.NORMALIZING
        try:
            block_data = normalize_block_data(raw_block, raw_receipts)
        except Exception as e:
            logger.error(f"Failed to parse block {block_number}: {type(e).__name__}: {str(e)}")
            return self._mark_failed(block_number, stats)

        BLOCK_PROCESSING_TIME.labels(chain=self.chain_name).observe(time.time() - block_start_time)

        stats.states[block_number] = BlockState.WRITING
        await self.write_block_data(block_data)

        stats.states[block_number] = BlockState.DONE
        BLOCKS_PROCESSED.labels(chain=self.chain_name).inc()
        LATEST_PROCESSED_BLOCK.labels(chain=self.chain_name).set(block_number)
        if self.tracker is not None:
            self.tracker.remove_block(block_number)
        logger.info(
            f"Block {block_number} handed to writer with {len(block_data.transactions)} transactions "
            f"and {len(block_data.receipts)} receipts"
        )
        return BlockState.DONE

    async def write_block_data(self, block_data: BlockData) -> None:
        if self.writer.is_active("blocks"):
            await self.writer.write("blocks", block_data.block)
        if self.writer.is_active("transactions"):
            for transaction in block_data.transactions:
                await self.writer.write("transactions", transaction)
        if self.writer.is_active("receipts"):
            for receipt in block_data.receipts:
                await self.writer.write("receipts", receipt)

    async def process_blocks(self, start: int, count: int) -> RunStats:
        """Process heights [start, start + count) and flush every buffer

        Raises:
            StoreError: if the destination store rejects a batch
        """
        if start < 0 or count < 0:
            raise ValueError(f"Invalid block range: start={start}, count={count}")

        logger.info(f"Starting indexing from block {start} for {count} blocks")
        stats = RunStats()
        written_before = self.writer.written
        run_start = time.monotonic()

        for block_number in range(start, start + count):
            if self.deadline is not None and time.monotonic() - run_start >= self.deadline:
                logger.warning(f"Run deadline of {self.deadline} seconds reached, stopping before block {block_number}")
                stats.deadline_hit = True
                break
            await self.process_block(block_number, stats)

        # Commit remaining data
        await self.writer.flush()

        written = self.writer.written
        stats.blocks = written.get("blocks", 0) - written_before.get("blocks", 0)
        stats.transactions = written.get("transactions", 0) - written_before.get("transactions", 0)
        stats.receipts = written.get("receipts", 0) - written_before.get("receipts", 0)
        stats.elapsed = time.monotonic() - run_start

        logger.info(
            f"Finished in {stats.elapsed:.2f} seconds. Blocks inserted: {stats.blocks}, "
            f"transactions inserted: {stats.transactions}, receipts inserted: {stats.receipts}"
        )
        if stats.failed:
            logger.warning(f"Skipped {len(stats.failed)} blocks: {stats.failed}")
        if stats.receipts_missing:
            logger.warning(f"Blocks written without receipts: {stats.receipts_missing}")
        return stats
