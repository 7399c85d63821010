from .query import (
    CategoryColumn,
    ColumnSource,
    QueryResult,
    ValueColumn,
    cell_object_value,
    coerce_number,
    query_from_dataframe,
    query_from_sequences,
)

__all__ = [
    "CategoryColumn",
    "ColumnSource",
    "QueryResult",
    "ValueColumn",
    "cell_object_value",
    "coerce_number",
    "query_from_dataframe",
    "query_from_sequences",
]
