"""
SQLAlchemy executor.

Runs composed statements through SQLAlchemy engines, connections or ORM
sessions (including Flask-SQLAlchemy's ``db.session``).
"""
import logging
from typing import Any, Sequence, Union

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import Session, scoped_session

from batch_insert.connectors.base import StatementExecutor, convert_placeholders
from batch_insert.core.errors import ExecutorWiringError

logger = logging.getLogger(__name__)

Bind = Union[Engine, Connection, Session, scoped_session]


class SQLAlchemyExecutor(StatementExecutor):
    """
    Executor backed by SQLAlchemy.

    With an Engine every chunk runs in its own ``engine.begin()`` transaction,
    so chunks commit independently. With a Connection or Session the chunks run
    on the caller's transaction, which lets the caller make the whole batch
    atomic.

    Example:
        >>> from sqlalchemy import create_engine
        >>> from batch_insert import batch_insert
        >>> from batch_insert.connectors import SQLAlchemyExecutor
        >>>
        >>> engine = create_engine("mysql+pymysql://user:pw@localhost/shop")
        >>> with engine.begin() as connection:
        ...     batch_insert("users", rows, 1000, SQLAlchemyExecutor(connection))
    """

    def __init__(self, bind: Bind):
        """
        Initialize a SQLAlchemy executor.

        Args:
            bind: Engine, Connection, Session or scoped_session

        Raises:
            ExecutorWiringError: If bind is none of the supported types
        """
        if not isinstance(bind, (Engine, Connection, Session, scoped_session)):
            raise ExecutorWiringError(
                f"Cannot execute statements on {type(bind).__name__}: "
                "expected an Engine, Connection or Session"
            )
        self.bind = bind

    def execute(self, statement: str, params: Sequence[Any]) -> int:
        if isinstance(self.bind, Engine):
            with self.bind.begin() as connection:
                return self._execute_on(connection, statement, params)
        if isinstance(self.bind, (Session, scoped_session)):
            return self._execute_on(self.bind.connection(), statement, params)
        return self._execute_on(self.bind, statement, params)

    def _execute_on(self, connection: Connection, statement: str, params: Sequence[Any]) -> int:
        sql, driver_params = convert_placeholders(
            statement, params, connection.dialect.paramstyle
        )
        logger.debug(f"Executing SQL: {sql[:200]}")
        result = connection.exec_driver_sql(sql, driver_params)
        return result.rowcount
