import os
from loguru import logger
from pydantic import BaseModel
from typing import List, Sequence

from .base import BaseDataManager
from ..data_types import TABLE_KEYS, TABLE_MODELS


class JsonFileDataManager(BaseDataManager):
    """
    Writes every record as its own pretty-printed JSON document

    Layout: <data_dir>/<chain_name>/<table_id>/<natural key>.json. Writing the
    same record twice overwrites the previous document.
    """

    supports_batching = False

    def __init__(self, chain_name: str, active_datasets: List[str] | None = None, **kwargs):
        """
        Args:
            chain_name (str): Name of the chain to work with
            active_datasets (List[str]): List of active datasets to manage
            **kwargs: Configuration parameters
                - data_dir (str): Base directory for the documents (default: "data")
        """
        self.chain_name = chain_name
        self.active_datasets = active_datasets or list(TABLE_MODELS)
        self.base_path = os.path.join(kwargs.get('data_dir', 'data'), chain_name)
        os.makedirs(self.base_path, exist_ok=True)

        for dataset in self.active_datasets:
            self.create_dataset(dataset)

    def create_dataset(self, dataset_id: str, **kwargs) -> None:
        dataset_path = os.path.join(self.base_path, dataset_id)
        os.makedirs(dataset_path, exist_ok=True)
        logger.info(f"Ensured dataset directory exists: {dataset_path}")

    def create_table(self, table_id: str, **kwargs) -> None:
        pass

    def document_path(self, table_id: str, row: BaseModel) -> str:
        key = getattr(row, TABLE_KEYS[table_id])
        return os.path.join(self.base_path, table_id, f"{key}.json")

    def load_table(self, rows: Sequence[BaseModel], table_id: str, **kwargs) -> None:
        for row in rows:
            file_path = self.document_path(table_id, row)
            with open(file_path, 'w') as f:
                f.write(row.model_dump_json(indent=2))
            logger.debug(f"Saved {table_id} record to {file_path}")
