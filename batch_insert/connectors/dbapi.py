"""
Generic DB-API 2.0 executor.

Works with any driver that follows the Python DB-API 2.0 specification, such
as sqlite3, PyMySQL or mysqlclient.
"""
import logging
from typing import Any, Sequence

from batch_insert.connectors.base import StatementExecutor, convert_placeholders

logger = logging.getLogger(__name__)


class DBAPIExecutor(StatementExecutor):
    """
    Executor for a raw DB-API connection.

    Example:
        >>> import sqlite3
        >>> from batch_insert import batch_insert
        >>> from batch_insert.connectors import DBAPIExecutor
        >>>
        >>> conn = sqlite3.connect(":memory:")
        >>> conn.execute("CREATE TABLE users (id INTEGER, name TEXT)")
        >>> executor = DBAPIExecutor(conn, paramstyle=sqlite3.paramstyle)
        >>> batch_insert("users", [{"id": 1, "name": "Alice"}], 100, executor)
        [1]
    """

    def __init__(self, connection: Any, paramstyle: str = "qmark", auto_commit: bool = False):
        """
        Initialize a DB-API executor.

        Args:
            connection: A DB-API compatible connection object
            paramstyle: The driver module's ``paramstyle``
            auto_commit: Whether to commit after each chunk
        """
        self.connection = connection
        self.paramstyle = paramstyle
        self.auto_commit = auto_commit

        logger.debug(f"Initialized DBAPIExecutor with paramstyle={paramstyle}")

    def execute(self, statement: str, params: Sequence[Any]) -> int:
        sql, driver_params = convert_placeholders(statement, params, self.paramstyle)
        cursor = self.connection.cursor()
        try:
            logger.debug(f"Executing SQL: {sql[:200]}")
            cursor.execute(sql, driver_params)
            if self.auto_commit:
                self.connection.commit()
            return cursor.rowcount
        except Exception:
            if self.auto_commit:
                self.connection.rollback()
            raise
        finally:
            cursor.close()
