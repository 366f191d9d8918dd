from abc import ABC, abstractmethod
from pydantic import BaseModel
from typing import List, Sequence


class BaseDataManager(ABC):
    """Abstract base class for all data managers"""

    # Stores that cannot batch get every row flushed as soon as it is written
    supports_batching: bool = True

    @abstractmethod
    def __init__(self, chain_name: str, active_datasets: List[str] | None = None, **kwargs):
        """
        Initialize data manager

        Args:
            chain_name (str): Name of the chain to work with
            active_datasets (List[str] | None): List of active datasets to manage
            **kwargs: Implementation-specific configuration parameters
        """
        pass

    @abstractmethod
    def create_dataset(self, dataset_id: str, **kwargs) -> None:
        pass

    @abstractmethod
    def create_table(self, table_id: str, **kwargs) -> None:
        pass

    @abstractmethod
    def load_table(self, rows: Sequence[BaseModel], table_id: str, **kwargs) -> None:
        """
        Write one batch of rows as a single unit of work

        Args:
            rows (Sequence[BaseModel]): Normalized records to save
            table_id (str): Name of the table
            **kwargs: Implementation-specific parameters
        """
        pass
