"""
Query collector for dry runs.

A QueryCollector can be passed to the compositor in place of a real executor.
It records every composed INSERT statement instead of running it, which is
useful for checking chunking and generated SQL without a database.
"""
from typing import Any, Dict, List, Sequence
import logging

logger = logging.getLogger(__name__)


class QueryCollector:
    """
    Collects composed INSERT statements instead of executing them.

    Calling the collector records the statement and reports every value group
    as one affected row.

    Example:
        >>> from batch_insert import batch_insert
        >>> collector = QueryCollector(table_name="users")
        >>> batch_insert("users", rows, 500, collector)
        >>> print(f"Collected {len(collector.queries)} queries")
        >>> print(f"Estimated total rows: {collector.total_row_count}")
    """

    def __init__(self, table_name: str = "unknown"):
        """
        Initialize a new query collector.

        Args:
            table_name: Table name recorded with every collected query
        """
        self.table_name = table_name
        self.queries: List[Dict[str, Any]] = []
        self.total_row_count = 0

    def __call__(self, statement: str, params: Sequence[Any]) -> int:
        row_count = count_value_groups(statement)
        self.add_query(statement, list(params), row_count, self.table_name)
        return row_count

    def add_query(self, statement: str, params: List[Any],
                  row_count: int, table_name: str = "unknown") -> None:
        """
        Add a query to the collector.

        Args:
            statement: SQL statement
            params: Flat parameter list of the statement
            row_count: Number of value groups in the statement
            table_name: Target table name
        """
        self.queries.append({
            "statement": statement,
            "params": params,
            "row_count": row_count,
            "table_name": table_name
        })
        self.total_row_count += row_count
        logger.debug(f"Added query to collector: INSERT on {table_name} ({row_count} rows)")

    def clear(self) -> None:
        """Clear all collected queries."""
        self.queries = []
        self.total_row_count = 0

    def get_queries_by_table(self, table_name: str) -> List[Dict[str, Any]]:
        """
        Get all queries for a specific table.

        Args:
            table_name: Table name to filter by

        Returns:
            List of query dictionaries for the specified table
        """
        return [q for q in self.queries if q["table_name"] == table_name]

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the collected queries.

        Returns:
            Dictionary with query and row counts, per table and overall
        """
        tables = set(q["table_name"] for q in self.queries)

        return {
            "total_queries": len(self.queries),
            "total_row_count": self.total_row_count,
            "total_parameters": sum(len(q["params"]) for q in self.queries),
            "tables": {
                table: len(self.get_queries_by_table(table))
                for table in tables
            },
        }


def count_value_groups(statement: str) -> int:
    """Count the ``(...)`` value groups after the VALUES keyword."""
    _, _, values = statement.rpartition(" VALUES ")
    return values.count(")")
