import asyncio
import os
import sys
from dynaconf import ValidationError
from loguru import logger

from .batch_writer import BatchWriter
from .data_manager import get_data_manager
from .errors import StoreError
from .indexer import EVMIndexer, RunStats
from .metrics import start_metrics_server
from .rpc_client import RPCClient
from .state_tracker import MissingBlockTracker
from .utils import load_config, setup_logging


async def main(config) -> RunStats:
    if config.metrics.enabled:
        start_metrics_server(config.metrics.port, addr='0.0.0.0')

    chain_name = config.chain.name
    logger.info(f"Processing {chain_name} chain")

    data_manager = get_data_manager(
        storage_type=config.storage.type,
        chain_name=chain_name,
        config=config.storage,
        active_datasets=list(config.datasets),
    )
    writer = BatchWriter(
        data_manager,
        max_rows=config.writer.max_rows,
        max_seconds=config.writer.max_seconds,
        tables=list(config.datasets),
    )
    tracker = MissingBlockTracker(config.run.missing_blocks_file) if config.run.missing_blocks_file else None

    async with RPCClient(config.chain.rpc_url, timeout=config.rpc.timeout) as rpc_client:
        indexer = EVMIndexer(
            rpc_client,
            writer,
            chain_name=chain_name,
            print_output=config.output.print_output,
            tracker=tracker,
            deadline=config.run.deadline,
        )
        return await indexer.process_blocks(config.range.start, config.range.count)


def run() -> None:
    try:
        config = load_config(os.environ.get("EVM_ETL_CONFIG", "config.yml"))
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    setup_logging(debug=config.output.debug, log_file=config.output.log_file)

    try:
        asyncio.run(main(config))
    except KeyboardInterrupt:
        logger.info("Program interrupted by user. Exiting.")
    except StoreError as e:
        logger.error(f"Aborting run: {e}")
        sys.exit(1)
    except (KeyError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
