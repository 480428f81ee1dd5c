"""
MySQL statement fragments for multi-row inserts.

Statements use backtick-quoted identifiers and ``?`` placeholders; executors
translate the placeholders to their driver's parameter style.
"""
from typing import Sequence

PLACEHOLDER = "?"
GROUP_SEPARATOR = ", "


def quote_identifier(name: str) -> str:
    """Quote a single identifier with backticks, doubling embedded backticks."""
    return "`" + name.replace("`", "``") + "`"


def quote_table_name(table_name: str) -> str:
    """
    Quote a table name, treating dots as schema separators.

    Args:
        table_name: Plain (``users``) or qualified (``shop.users``) table name

    Returns:
        Quoted table name, e.g. ```shop`.`users```
    """
    return ".".join(quote_identifier(part) for part in table_name.split("."))


def compose_insert_prefix(table_name: str, columns: Sequence[str]) -> str:
    """Build the shared ``INSERT INTO ... VALUES `` prefix of every chunk."""
    column_list = ", ".join(quote_identifier(column) for column in columns)
    return f"INSERT INTO {quote_table_name(table_name)} ({column_list}) VALUES "


def compose_value_group(column_count: int) -> str:
    """Build one ``(?, ?, ...)`` value group."""
    return "(" + ", ".join([PLACEHOLDER] * column_count) + ")"
