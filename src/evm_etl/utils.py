import re
import sys
from datetime import datetime, timezone, date
from dynaconf import Dynaconf, Validator
from loguru import logger
from pathlib import Path
from typing import Any, Union

from .data_types import TABLE_MODELS

HEX_PATTERN = re.compile(r"(0[xX])?[0-9a-fA-F]+")


def hex_to_int(value: Any) -> int:
    """Decode a JSON-RPC hex quantity into an unsigned integer

    Anything that is not a hex string (empty string, "0x", None, garbage)
    decodes to 0 instead of raising.
    """
    if not isinstance(value, str) or not HEX_PATTERN.fullmatch(value):
        return 0
    return int(value, 16)


def hex_to_bool(value: Any) -> bool:
    return hex_to_int(value) == 1


def int_to_hex(value: int) -> str:
    if value < 0:
        raise ValueError(f"Block number must be non-negative, got {value}")
    return hex(value)


def unix_to_utc(timestamp: int, date_only: bool = False) -> Union[date, datetime]:
    """Convert Unix timestamp to UTC datetime/date object

    Args:
        timestamp (int): Unix timestamp in seconds
        date_only (bool): If True, returns date object.
                         If False, returns datetime object

    Returns:
        Union[date, datetime]: UTC datetime or date object
    """
    dt = datetime.fromtimestamp(timestamp, timezone.utc)
    return dt.date() if date_only else dt


def setup_logging(debug: bool = False, log_file: str | None = "logs/indexer.log") -> None:
    level = "DEBUG" if debug else "INFO"
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(log_file, level=level, rotation="100 MB", retention="10 days")


def load_config(file_name: str = "config.yml") -> Dynaconf:
    """Load and validate the backfill configuration

    Values from the YAML file can be overridden through environment variables
    prefixed with EVM_ETL_, using double underscores for nesting
    (e.g. EVM_ETL_RANGE__start=100).

    Params:
        file_name (str): Path of the config file to load

    Returns:
        Dynaconf: Validated configuration object
    """
    config_path = Path(file_name).resolve()
    if not config_path.exists():
        logger.warning(f"Config file {config_path} not found, using defaults and environment")

    settings = Dynaconf(
        settings_files=[str(config_path)],
        envvar_prefix="EVM_ETL",
        load_dotenv=True,
        validators=[
            Validator('chain.name', default='ethereum',
                      is_type_of=str,
                      condition=lambda x: x.islower() and x == x.strip(),
                      messages={"condition": "Chain name must be lowercase with no leading/trailing spaces"}
            ),
            Validator('chain.rpc_url', must_exist=True, is_type_of=str),
            Validator('range.start', default=1, is_type_of=int, gte=0),
            Validator('range.count', default=1, is_type_of=int, gte=1),
            Validator('rpc.timeout', default=30, is_type_of=(int, float), gt=0),
            Validator('storage.type', default='json', is_in=['bigquery', 'parquet', 'json']),
            Validator('storage.data_dir', default='data', is_type_of=str),
            Validator('storage.project_id', 'storage.gcp_region',
                      must_exist=True,
                      when=Validator('storage.type', eq='bigquery')),
            Validator('writer.max_rows', default=1000, is_type_of=int, gte=1),
            Validator('writer.max_seconds', default=20, is_type_of=(int, float), gt=0),
            Validator('run.deadline', default=None,
                      condition=lambda x: x is None or (isinstance(x, (int, float)) and not isinstance(x, bool) and x > 0),
                      messages={"condition": "Run deadline must be a positive number of seconds"}
            ),
            Validator('run.missing_blocks_file', default=None),
            Validator('output.print_output', default=False, is_type_of=bool),
            Validator('output.debug', default=False, is_type_of=bool),
            Validator('output.log_file', default='logs/indexer.log'),
            Validator('metrics.enabled', default=False, is_type_of=bool),
            Validator('metrics.port', default=8000, is_type_of=int),
            Validator('datasets', default=list(TABLE_MODELS), is_type_of=list,
                      condition=lambda x: len(x) > 0 and set(x) <= set(TABLE_MODELS),
                      messages={"condition": f"Datasets must be a non-empty subset of {list(TABLE_MODELS)}"}
            ),
        ]
    )
    # Validate all settings at once
    settings.validators.validate()

    return settings
