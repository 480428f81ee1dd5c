"""
Exception types raised while composing and flushing batched inserts.

None of these are retried by the compositor; they all propagate to the caller.
"""
from typing import Optional


class BatchInsertError(Exception):
    """Base class for all batch insert errors."""


class UnsupportedRowShape(BatchInsertError, TypeError):
    """Raised when a row is neither a mapping nor a registered entity."""


class RowShapeMismatch(UnsupportedRowShape):
    """
    Raised when a row does not have the same shape as the first row of the batch.

    The column set of a batch is derived from its first row only, so a later row
    with a different kind, entity class or column set would otherwise produce a
    statement whose parameters no longer line up with its placeholders.
    """

    def __init__(self, position: int, message: str):
        self.position = position
        super().__init__(f"Row {position} does not match the first row: {message}")


class ExecutorWiringError(BatchInsertError, TypeError):
    """Raised when the injected executor cannot be invoked or breaks its contract."""


class ExecutionFailure(BatchInsertError, RuntimeError):
    """
    Raised when the executor fails while flushing a chunk.

    The original exception is available as ``__cause__`` and as ``cause``.
    Chunks flushed before the failing one are not rolled back.

    Attributes:
        chunk: 1-based number of the chunk that failed
        row_count: Number of rows (value groups) in the failing chunk
        cause: The exception raised by the executor
    """

    def __init__(self, chunk: int, row_count: int, cause: Optional[BaseException] = None):
        self.chunk = chunk
        self.row_count = row_count
        self.cause = cause
        super().__init__(
            f"Failed to execute insert chunk {chunk} ({row_count} rows): {str(cause)}"
        )


class RegistryFrozenError(BatchInsertError, RuntimeError):
    """Raised when a model is registered after the table registry was frozen."""
