"""
Multi-row insert compositor.

Rows are turned into ``INSERT INTO `t` (`a`, `b`) VALUES (?, ?), (?, ?), ...``
statements of at most ``chunk_size`` value groups each, and every statement is
handed to an injected executor together with its flat parameter list. This
replaces one round trip per row with one per chunk.
"""
import inspect
import itertools
import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence

from batch_insert.core.dialect import (
    GROUP_SEPARATOR,
    compose_insert_prefix,
    compose_value_group,
)
from batch_insert.core.errors import (
    BatchInsertError,
    ExecutionFailure,
    ExecutorWiringError,
    RowShapeMismatch,
)
from batch_insert.core.registry import TableRegistry
from batch_insert.core.rows import EntityRow, Row, as_row

logger = logging.getLogger(__name__)

Executor = Callable[[str, Sequence[Any]], int]
ChunkCallback = Callable[[int, int], None]

_END = object()


def _check_executor_signature(executor: Executor) -> None:
    """Fail early when the executor cannot take (statement, params)."""
    try:
        signature = inspect.signature(executor)
    except (TypeError, ValueError):
        # builtins without introspectable signatures are trusted
        return
    try:
        signature.bind("", [])
    except TypeError as e:
        raise ExecutorWiringError(
            f"Executor must accept (statement, params): {e}"
        ) from e


class BatchInsertCompositor:
    """
    Composes and flushes chunked multi-row INSERT statements.

    The compositor never opens connections or transactions itself. If the
    batch has to be atomic, run it inside a transaction owned by the caller
    (see ``SQLAlchemyExecutor``); chunks flushed before a failure are not
    rolled back here.

    Attributes:
        chunk_size: Number of rows per INSERT statement
        registry: Table registry used to resolve entity rows (optional)

    Example:
        >>> compositor = BatchInsertCompositor(chunk_size=500)
        >>> compositor.insert("users", [{"id": 1, "name": "Alice"}], executor)
        [1]
    """

    def __init__(self, chunk_size: int, registry: Optional[TableRegistry] = None):
        """
        Initialize a compositor.

        Args:
            chunk_size: Positive number of value groups per statement
            registry: Table registry for entity rows

        Raises:
            ValueError: If chunk_size is not a positive integer
        """
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size < 1:
            raise ValueError(f"chunk_size must be a positive integer, got {chunk_size!r}")
        self.chunk_size = chunk_size
        self.registry = registry

    def insert(
        self,
        table_name: Optional[str],
        rows: Optional[Iterable[Any]],
        executor: Executor,
        on_chunk: Optional[ChunkCallback] = None
    ) -> List[int]:
        """
        Insert rows in chunks of multi-row INSERT statements.

        Args:
            table_name: Target table; may be None for entity rows, in which case
                the registered table of the first row's class is used
            rows: Mappings or registered entities, all of the same shape
            executor: Callable ``(statement, params) -> affected_rows``
            on_chunk: Optional callback ``(rows_in_chunk, affected_rows)`` run
                after every flushed chunk

        Returns:
            ``[]`` if there was nothing to insert, otherwise a single-element
            list with the total number of affected rows

        Raises:
            UnsupportedRowShape: If a row is not a supported shape
            RowShapeMismatch: If a row differs in shape from the first row
            ExecutionFailure: If the executor fails on a chunk
            ExecutorWiringError: If the executor is not callable, cannot take
                (statement, params) or does not return an integer count
        """
        if not callable(executor):
            raise ExecutorWiringError(f"Executor must be callable, got {type(executor).__name__}")
        _check_executor_signature(executor)
        if table_name is not None and (not isinstance(table_name, str) or not table_name.strip()):
            raise ValueError(f"table_name must be a non-empty string, got {table_name!r}")

        if rows is None:
            return []
        iterator = iter(rows)
        first = next(iterator, _END)
        if first is _END:
            logger.debug("No rows to insert")
            return []

        first_row = as_row(first, self.registry)
        table_name = self._resolve_table_name(table_name, first_row)
        columns = first_row.columns()
        column_set = set(columns)

        prefix = compose_insert_prefix(table_name, columns)
        group = compose_value_group(len(columns))
        logger.debug(f"Inserting into {table_name} with columns {columns} "
                     f"in chunks of {self.chunk_size}")

        groups: List[str] = []
        params: List[Any] = []
        affected_rows = 0
        chunk = 0
        position = 0

        for position, obj in enumerate(itertools.chain([first], iterator), start=1):
            if position == 1:
                row = first_row
            else:
                row = as_row(obj, self.registry)
                self._check_shape(position, row, first_row, column_set)

            groups.append(group)
            for column in columns:
                params.append(row.value(column))

            if position % self.chunk_size == 0:
                chunk += 1
                affected_rows += self._flush(executor, prefix, groups, params, chunk, on_chunk)
                groups = []
                params = []

        if groups:
            chunk += 1
            affected_rows += self._flush(executor, prefix, groups, params, chunk, on_chunk)

        logger.info(f"Inserted {position} rows into {table_name} in {chunk} chunks "
                    f"({affected_rows} rows affected)")
        return [affected_rows]

    def _resolve_table_name(self, table_name: Optional[str], first_row: Row) -> str:
        if table_name is not None:
            return table_name
        if isinstance(first_row, EntityRow):
            return first_row.metadata.name
        raise ValueError("table_name is required when inserting mapping rows")

    def _check_shape(self, position: int, row: Row, first_row: Row, column_set: set) -> None:
        if row.kind != first_row.kind:
            raise RowShapeMismatch(
                position, f"expected a {first_row.kind} row, got a {row.kind} row"
            )
        if row.shape != first_row.shape:
            raise RowShapeMismatch(
                position, f"expected {first_row.shape[-1].__name__}, got {row.shape[-1].__name__}"
            )

        row_columns = set(row.columns())
        if row_columns != column_set:
            missing = sorted(column_set - row_columns)
            extra = sorted(row_columns - column_set)
            raise RowShapeMismatch(position, f"missing columns {missing}, extra columns {extra}")

    def _flush(
        self,
        executor: Executor,
        prefix: str,
        groups: List[str],
        params: List[Any],
        chunk: int,
        on_chunk: Optional[ChunkCallback]
    ) -> int:
        statement = prefix + GROUP_SEPARATOR.join(groups)
        row_count = len(groups)
        logger.debug(f"Flushing chunk {chunk} ({row_count} rows, {len(params)} parameters)")

        try:
            affected = executor(statement, params)
        except BatchInsertError:
            raise
        except Exception as e:
            logger.error(f"Error executing insert chunk {chunk}: {str(e)}", exc_info=True)
            raise ExecutionFailure(chunk, row_count, e) from e

        if isinstance(affected, bool) or not isinstance(affected, int):
            raise ExecutorWiringError(
                f"Executor must return the affected row count as int, "
                f"got {type(affected).__name__}"
            )

        if on_chunk is not None:
            on_chunk(row_count, affected)
        return affected


def batch_insert(
    table_name: Optional[str],
    rows: Optional[Iterable[Any]],
    chunk_size: int,
    executor: Executor,
    registry: Optional[TableRegistry] = None,
    on_chunk: Optional[ChunkCallback] = None
) -> List[int]:
    """
    Insert rows into a table using multi-row INSERT statements.

    Shortcut for ``BatchInsertCompositor(chunk_size, registry).insert(...)``.

    Args:
        table_name: Target table (optional for entity rows)
        rows: Mappings or registered entities of one shape
        chunk_size: Rows per INSERT statement
        executor: Callable ``(statement, params) -> affected_rows``
        registry: Table registry for entity rows
        on_chunk: Optional per-chunk progress callback

    Returns:
        ``[]`` for empty input, else ``[total_affected_rows]``
    """
    compositor = BatchInsertCompositor(chunk_size, registry)
    return compositor.insert(table_name, rows, executor, on_chunk)
