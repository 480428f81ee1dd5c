"""
Core modules for composing batched multi-row inserts
"""
from batch_insert.core.compositor import BatchInsertCompositor, batch_insert
from batch_insert.core.errors import (
    BatchInsertError, UnsupportedRowShape, RowShapeMismatch,
    ExecutionFailure, ExecutorWiringError, RegistryFrozenError
)
from batch_insert.core.query_collector import QueryCollector
from batch_insert.core.registry import TableMetadata, TableRegistry
from batch_insert.core.rows import Row, MappingRow, EntityRow, as_row
