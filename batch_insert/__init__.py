"""
Batch Insert - multi-row INSERT statements for bulk loading

This package composes one ``INSERT ... VALUES (...), (...)`` statement per chunk
of rows instead of one statement per row, and runs each chunk through an
injected executor. Rows may be plain mappings or SQLAlchemy entities.
"""

from batch_insert.core.compositor import BatchInsertCompositor, batch_insert
from batch_insert.core.errors import (
    BatchInsertError,
    ExecutionFailure,
    ExecutorWiringError,
    RegistryFrozenError,
    RowShapeMismatch,
    UnsupportedRowShape,
)
from batch_insert.core.query_collector import QueryCollector
from batch_insert.core.registry import TableRegistry

__version__ = "0.1.0"
__all__ = [
    "BatchInsertCompositor",
    "batch_insert",
    "QueryCollector",
    "TableRegistry",
    "BatchInsertError",
    "UnsupportedRowShape",
    "RowShapeMismatch",
    "ExecutionFailure",
    "ExecutorWiringError",
    "RegistryFrozenError",
]
