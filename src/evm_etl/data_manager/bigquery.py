import google.api_core.exceptions
from google.cloud import bigquery
from loguru import logger
from pydantic import BaseModel
from typing import List, Sequence

from .base import BaseDataManager
from .utils import get_bigquery_schema, models_to_dataframe, to_bignumeric
from ..data_types import TABLE_MODELS


class BigQueryDataManager(BaseDataManager):
    """
    A class to manage BigQuery operations for blockchain data
    """

    def __init__(self, chain_name: str, active_datasets: List[str] | None = None, **kwargs):
        """
        Initialize BigQuery client with credentials and dataset

        Args:
            chain_name (str): Name of the chain to work with, used as dataset id
            active_datasets (List[str]): List of active datasets to manage
            **kwargs: Configuration parameters
                - gcp_region (str): Geographic location for BigQuery dataset (required)
                - project_id (str): Google Cloud project ID (required)
                - chunk_size (int): Maximum rows per load job (default: 10000)
                - client (bigquery.Client): Pre-built client, mostly for tests
        """
        if 'project_id' not in kwargs:
            raise ValueError("project_id is required for BigQuery configuration")
        if 'gcp_region' not in kwargs:
            raise ValueError("gcp_region is required for BigQuery configuration")

        self.client = kwargs.get('client') or bigquery.Client(project=kwargs['project_id'])
        self.dataset_id = chain_name
        self.gcp_region = kwargs['gcp_region']
        self.chunk_size = kwargs.get('chunk_size', 10000)
        self.active_datasets = active_datasets or list(TABLE_MODELS)

        # Generate schemas dynamically from Pydantic models
        self.schemas = {
            table_id: get_bigquery_schema(TABLE_MODELS[table_id])
            for table_id in self.active_datasets
        }

        # Create dataset if it doesn't exist
        self.create_dataset(self.dataset_id)

        # Create tables if they don't exist
        for table_id in self.active_datasets:
            self.create_table(table_id)

    def _get_schema_for_table(self, table_id: str) -> List[bigquery.SchemaField]:
        """Helper method to get the appropriate schema for a table"""
        if table_id not in self.schemas:
            raise ValueError(f"Unable to determine schema for table {table_id}")
        return self.schemas[table_id]

    def create_dataset(self, dataset_id: str, **kwargs) -> None:
        """Creates the dataset if it doesn't already exist"""
        dataset_ref = bigquery.DatasetReference(self.client.project, dataset_id)

        try:
            dataset = self.client.get_dataset(dataset_ref)
            if dataset.location != self.gcp_region:
                logger.warning(f"Dataset {dataset_id} exists but in different location: {dataset.location} (expected {self.gcp_region})")
            else:
                logger.info(f"Dataset {dataset_id} already exists in {self.gcp_region}")
        except google.api_core.exceptions.NotFound:
            dataset = bigquery.Dataset(dataset_ref)
            dataset.location = self.gcp_region
            dataset = self.client.create_dataset(dataset)
            logger.info(f"Created dataset {dataset_id} in location {self.gcp_region}")

    def create_table(self, table_id: str, **kwargs) -> None:
        """
        Creates a date-partitioned table with the model's schema if it doesn't exist

        Args:
            table_id (str): ID for the table
        """
        table_ref = bigquery.DatasetReference(self.client.project, self.dataset_id).table(table_id)

        try:
            self.client.get_table(table_ref)
            logger.info(f"Table {table_id} already exists")
            return
        except google.api_core.exceptions.NotFound:
            table = bigquery.Table(table_ref, schema=self._get_schema_for_table(table_id))

            # Add date partitioning
            partition_field = "block_date"
            table.time_partitioning = bigquery.TimePartitioning(
                type_=bigquery.TimePartitioningType.DAY,
                field=partition_field
            )

            table = self.client.create_table(table)
            logger.info(f"Created table {table.project}.{table.dataset_id}.{table.table_id} with partitioning on {partition_field}")

    def load_table(self, rows: Sequence[BaseModel], table_id: str, **kwargs) -> None:
        """
        Append rows to a BigQuery table using batch load jobs

        Args:
            rows (Sequence[BaseModel]): Normalized records to load
            table_id (str): ID of the target table
        """
        table_ref = bigquery.DatasetReference(self.client.project, self.dataset_id).table(table_id)
        df = models_to_dataframe(rows, wide_int=to_bignumeric)

        job_config = bigquery.LoadJobConfig(
            schema=self._get_schema_for_table(table_id),
            write_disposition=bigquery.WriteDisposition.WRITE_APPEND
        )

        # Process DataFrame in chunks to handle large datasets
        total_rows = len(df)
        for i in range(0, total_rows, self.chunk_size):
            chunk_df = df.iloc[i:i + self.chunk_size]

            job = self.client.load_table_from_dataframe(
                chunk_df,
                table_ref,
                job_config=job_config
            )

            job.result()  # Wait for the job to complete

            logger.debug(f"Loaded rows {i} to {min(i + self.chunk_size, total_rows)}")

        logger.info(f"Successfully loaded {total_rows} total rows to table {table_id}")
