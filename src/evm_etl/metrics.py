from prometheus_client import Counter, Gauge, Histogram, start_http_server
from loguru import logger

# Block processing metrics
BLOCKS_PROCESSED = Counter(
    'evm_etl_blocks_processed_total',
    'Total number of block heights normalized and handed to the writer',
    ['chain']
)

BLOCKS_FAILED = Counter(
    'evm_etl_blocks_failed_total',
    'Total number of block heights skipped because of fetch or parse errors',
    ['chain']
)

LATEST_PROCESSED_BLOCK = Gauge(
    'evm_etl_latest_processed_block_number',
    'Latest block number processed',
    ['chain']
)

BLOCK_PROCESSING_TIME = Histogram(
    'evm_etl_block_processing_seconds',
    'Time spent fetching and normalizing one block height',
    ['chain'],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0]
)

# RPC metrics
RPC_REQUESTS = Counter(
    'evm_etl_rpc_requests_total',
    'Total number of RPC requests made',
    ['method']
)

RPC_ERRORS = Counter(
    'evm_etl_rpc_errors_total',
    'Total number of RPC errors encountered',
    ['method']
)

RPC_LATENCY = Histogram(
    'evm_etl_rpc_latency_seconds',
    'RPC request latency',
    ['method'],
    buckets=[0.025, 0.05, 0.075, 0.1, 0.15, 0.2, 0.3, 0.5, 1.0, 5.0, 10.0]
)

# Storage metrics
ROWS_FLUSHED = Counter(
    'evm_etl_rows_flushed_total',
    'Total number of rows written to the destination store',
    ['table']
)

FLUSH_LATENCY = Histogram(
    'evm_etl_flush_latency_seconds',
    'Time spent writing one batch to the destination store',
    ['table'],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0]
)


def start_metrics_server(port: int = 8000, addr: str = '0.0.0.0'):
    """Start Prometheus metrics server

    Args:
        port (int): Port to listen on
        addr (str): Address to bind to (default: all interfaces)
    """
    logger.info(f"Starting Prometheus metrics server on {addr}:{port}")
    start_http_server(port, addr)
