from enum import Enum
from typing import List
from .base import BaseDataManager
from .bigquery import BigQueryDataManager
from .json_files import JsonFileDataManager
from .parquet import ParquetDataManager

class StorageType(Enum):
    BIGQUERY = "bigquery"
    JSON = "json"
    PARQUET = "parquet"

class DataManagerFactory:
    _managers = {
        StorageType.BIGQUERY: BigQueryDataManager,
        StorageType.JSON: JsonFileDataManager,
        StorageType.PARQUET: ParquetDataManager,
    }

    @classmethod
    def get_manager(cls, storage_type: str, chain_name: str, config: dict, active_datasets: List[str] | None = None) -> BaseDataManager:
        """
        Factory method to get the appropriate data manager instance

        Args:
            storage_type (str): Type of storage from config
            chain_name (str): Name of the chain
            config (dict): Storage-specific configuration
            active_datasets (List[str]): List of active datasets to manage
        Returns:
            BaseDataManager: Instance of the appropriate data manager
        """
        try:
            storage_enum = StorageType(storage_type.lower())
        except ValueError:
            raise ValueError(f"Invalid storage type: {storage_type}. Supported types: {[t.value for t in StorageType]}")

        manager_class = cls._managers[storage_enum]
        options = {key.lower(): value for key, value in dict(config or {}).items() if key.lower() != 'type'}
        return manager_class(
            chain_name=chain_name,
            active_datasets=active_datasets,
            **options
        )

def get_data_manager(storage_type: str, chain_name: str, config: dict, active_datasets: List[str] | None = None) -> BaseDataManager:
    return DataManagerFactory.get_manager(storage_type, chain_name, config, active_datasets)

__all__ = [
    "BaseDataManager",
    "BigQueryDataManager",
    "JsonFileDataManager",
    "ParquetDataManager",
    "StorageType",
    "get_data_manager",
]
