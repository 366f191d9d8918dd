import os
import re
import pandas as pd
from loguru import logger
from pydantic import BaseModel
from typing import List, Sequence, Set

from .base import BaseDataManager
from .utils import models_to_dataframe
from ..data_types import TABLE_MODELS


class ParquetDataManager(BaseDataManager):
    """
    A class to manage Parquet file operations for blockchain data
    """

    def __init__(self, chain_name: str, active_datasets: List[str] | None = None, **kwargs):
        """
        Initialize Parquet storage manager

        Args:
            chain_name (str): Name of the chain to work with
            active_datasets (List[str]): List of active datasets to manage
            **kwargs: Configuration parameters
                - data_dir (str): Base directory for storing parquet files (default: "data")
        """
        self.chain_name = chain_name
        self.active_datasets = active_datasets or list(TABLE_MODELS)

        # Get data directory from kwargs with default
        data_dir = kwargs.get('data_dir', 'data')

        # Create base directory path
        self.base_path = os.path.join(data_dir, chain_name)
        os.makedirs(self.base_path, exist_ok=True)

        # Files created by this run; anything else on disk is from a previous run
        self._written_paths: set[str] = set()

        # Create dataset directories if they don't exist
        for dataset in self.active_datasets:
            self.create_dataset(dataset)

    def create_dataset(self, dataset_id: str, **kwargs) -> None:
        """Creates a directory for the dataset if it doesn't exist"""
        dataset_path = os.path.join(self.base_path, dataset_id)
        os.makedirs(dataset_path, exist_ok=True)
        logger.info(f"Ensured dataset directory exists: {dataset_path}")

    def create_table(self, table_id: str, **kwargs) -> None:
        """
        For Parquet, we don't need to pre-create tables as they're created when data is written
        """
        pass

    def _file_path(self, table_id: str, start_block: int, end_block: int) -> str:
        return os.path.join(self.base_path, table_id, f"{table_id}_{start_block}_{end_block}.parquet")

    def _previous_files(self, table_id: str, start_block: int, end_block: int) -> List[str]:
        """Files from earlier runs whose block range overlaps [start_block, end_block]"""
        table_path = os.path.join(self.base_path, table_id)
        pattern = re.compile(rf"{re.escape(table_id)}_(\d+)_(\d+)\.parquet")
        overlapping = []
        for file_name in sorted(os.listdir(table_path)):
            match = pattern.fullmatch(file_name)
            if match is None:
                continue
            file_path = os.path.join(table_path, file_name)
            if file_path in self._written_paths:
                continue
            file_start, file_end = int(match.group(1)), int(match.group(2))
            if file_start <= end_block and start_block <= file_end:
                overlapping.append(file_path)
        return overlapping

    def _clear_previous_rows(self, table_id: str, block_column: str, heights: Set[int]) -> None:
        """
        Drop rows of the given heights from files left by earlier runs

        Rows of other heights are kept in a file renamed after the range they
        still cover. A file left with no rows is deleted.
        """
        for file_path in self._previous_files(table_id, min(heights), max(heights)):
            old_df = pd.read_parquet(file_path)
            kept_df = old_df[~old_df[block_column].isin(heights)]
            os.remove(file_path)
            if kept_df.empty:
                logger.info(f"Removed {file_path} written by a previous run")
                continue

            kept_path = self._file_path(table_id, int(kept_df[block_column].min()), int(kept_df[block_column].max()))
            if os.path.exists(kept_path):
                kept_df = pd.concat([pd.read_parquet(kept_path), kept_df], ignore_index=True)
            kept_df.to_parquet(kept_path, index=False)
            logger.info(f"Kept {len(kept_df)} rows from a previous run in {kept_path}")

    def load_table(self, rows: Sequence[BaseModel], table_id: str, **kwargs) -> None:
        """
        Write rows into a Parquet file named after the block range they cover

        Rows that earlier runs wrote for the same heights are removed first,
        so re-running a range leaves one copy of each row whatever the batch
        boundaries were. A file already written during this run is appended to.

        Args:
            rows (Sequence[BaseModel]): Normalized records to save
            table_id (str): Name of the table (used as directory name)
        """
        if not rows:
            return

        df = models_to_dataframe(rows, wide_int=str)
        block_column = 'number' if table_id == 'blocks' else 'block_number'
        start_block = int(df[block_column].min())
        end_block = int(df[block_column].max())

        os.makedirs(os.path.join(self.base_path, table_id), exist_ok=True)
        self._clear_previous_rows(table_id, block_column, set(int(height) for height in df[block_column]))

        file_path = self._file_path(table_id, start_block, end_block)
        if file_path in self._written_paths and os.path.exists(file_path):
            existing_df = pd.read_parquet(file_path)
            df = pd.concat([existing_df, df], ignore_index=True)

        df.to_parquet(file_path, index=False)
        self._written_paths.add(file_path)

        logger.info(f"Saved {len(df)} rows to {file_path}")
