import pandas as pd
from google.cloud import bigquery
from datetime import datetime, date
from decimal import Decimal
from pydantic import BaseModel
from typing import Callable, List, Sequence, Type, get_args, get_origin

from ..data_types import WIDE_INT_COLUMNS

# Dictionary to map Python/Pydantic types to BigQuery types
TYPE_MAPPING = {
    int: 'INTEGER',
    str: 'STRING',
    float: 'FLOAT',
    bool: 'BOOLEAN',
    datetime: 'TIMESTAMP',
    date: 'DATE',
}


def _unwrap_optional(annotation):
    """Return (inner_type, is_optional) for Optional[X] / X | None"""
    args = [arg for arg in get_args(annotation) if arg is not type(None)]
    if len(args) == 1 and type(None) in get_args(annotation):
        return args[0], True
    return annotation, False


def get_bigquery_schema(model_class: Type[BaseModel]) -> List[bigquery.SchemaField]:
    schema = []

    for field_name, field in model_class.model_fields.items():
        annotation, optional = _unwrap_optional(field.annotation)

        # Lists become REPEATED columns, nested models become RECORDs
        repeated = get_origin(annotation) in (list, List)
        if repeated:
            annotation = get_args(annotation)[0]

        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            schema.append(bigquery.SchemaField(
                name=field_name,
                field_type='RECORD',
                mode='REPEATED' if repeated else 'NULLABLE',
                fields=get_bigquery_schema(annotation),
            ))
            continue

        # Wide quantities overflow INTEGER. BIGNUMERIC holds integers up to
        # about 5.79e38, well short of the full uint256 range
        if field_name in WIDE_INT_COLUMNS:
            bq_type = 'BIGNUMERIC'
        else:
            bq_type = TYPE_MAPPING.get(annotation, 'STRING')

        if repeated:
            mode = 'REPEATED'
        elif optional:
            mode = 'NULLABLE'
        else:
            mode = 'REQUIRED'

        schema.append(bigquery.SchemaField(name=field_name, field_type=bq_type, mode=mode))

    return schema


def models_to_dataframe(rows: Sequence[BaseModel], wide_int: Callable[[int], object] = str) -> pd.DataFrame:
    """Build a DataFrame from normalized records

    Wide integer columns are converted with `wide_int` (str for Parquet,
    a BIGNUMERIC converter for BigQuery) since pandas and Arrow cannot hold
    integers wider than 64 bits.
    """
    records = []
    for row in rows:
        record = row.model_dump()
        for column in WIDE_INT_COLUMNS.intersection(record):
            if record[column] is not None:
                record[column] = wide_int(record[column])
        records.append(record)
    return pd.DataFrame(records)


# Largest integer a BIGNUMERIC column accepts
BIGNUMERIC_MAX_INT = 578960446186580977117854925043439539266


def to_bignumeric(value: int) -> Decimal:
    if abs(value) > BIGNUMERIC_MAX_INT:
        raise ValueError(f"Value {value} does not fit in a BIGNUMERIC column")
    return Decimal(value)
