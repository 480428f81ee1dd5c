"""
Executors that run composed INSERT statements.

This package provides ready-made executors for SQLAlchemy and plain DB-API
connections.
"""

from batch_insert.connectors.base import StatementExecutor, convert_placeholders
from batch_insert.connectors.dbapi import DBAPIExecutor
from batch_insert.connectors.sqlalchemy_executor import SQLAlchemyExecutor

__all__ = ["StatementExecutor", "DBAPIExecutor", "SQLAlchemyExecutor", "convert_placeholders"]
