#!/usr/bin/env python3
"""
Batch Insert - CLI tool for loading CSV files with multi-row INSERT statements.
"""
import sys
import logging
from typing import Optional

import click
import polars as pl
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, TextColumn, BarColumn, TimeElapsedColumn, TimeRemainingColumn
from rich.table import Table
from sqlalchemy import create_engine

from batch_insert import __version__
from batch_insert.config import (
    CSV_NULL_VALUES, DATABASE_URL_ENV, DEFAULT_CHUNK_SIZE,
    DEFAULT_DELIMITER, DEFAULT_QUOTE_CHAR
)
from batch_insert.connectors import SQLAlchemyExecutor
from batch_insert.core.compositor import batch_insert
from batch_insert.core.errors import BatchInsertError
from batch_insert.core.query_collector import QueryCollector
from batch_insert.utils import setup_logging, validate_csv_file

# Initialize console for rich output
console = Console()

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    Batch Insert - load rows with multi-row INSERT statements.

    Rows are sent in chunks of one ``INSERT ... VALUES (...), (...)`` statement
    each instead of one statement per row.
    """
    pass


@cli.command()
@click.option('--csv-file', '-f', required=True, help='Path to the CSV file')
@click.option('--table-name', '-t', required=True, help='Target table name (optionally schema.table)')
@click.option('--database-url', envvar=DATABASE_URL_ENV,
              help=f'SQLAlchemy database URL (default: ${DATABASE_URL_ENV})')
@click.option('--chunk-size', '-c', default=DEFAULT_CHUNK_SIZE, type=click.IntRange(min=1),
              help=f'Rows per INSERT statement (default: {DEFAULT_CHUNK_SIZE})')
@click.option('--delimiter', '-d', default=DEFAULT_DELIMITER, help='CSV delimiter (default: comma)')
@click.option('--quote-char', '-q', default=DEFAULT_QUOTE_CHAR,
              help='CSV quote character (default: double quote)')
@click.option('--dry-run', is_flag=True, help='Compose the statements without executing them')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def load(csv_file: str, table_name: str, database_url: Optional[str], chunk_size: int,
         delimiter: str, quote_char: str, dry_run: bool, verbose: bool):
    """
    Load a CSV file into a table.

    The CSV header provides the column names. All chunks run in a single
    transaction, so a failing chunk leaves the table unchanged.
    """
    setup_logging(verbose)

    if not validate_csv_file(csv_file):
        console.print(f"[bold red]Error:[/bold red] Invalid CSV file: {csv_file}")
        sys.exit(1)

    if not dry_run and not database_url:
        console.print(f"[bold red]Error:[/bold red] --database-url or ${DATABASE_URL_ENV} is required")
        sys.exit(1)

    try:
        with console.status("[bold blue]Reading CSV...[/bold blue]"):
            df = pl.read_csv(
                csv_file,
                separator=delimiter,
                quote_char=quote_char,
                null_values=CSV_NULL_VALUES,
                try_parse_dates=True,
            )
        logger.info(f"Read {df.height} rows with columns {df.columns} from {csv_file}")

        if df.height == 0:
            console.print("[bold yellow]No rows to insert[/bold yellow]")
            return

        if dry_run:
            console.print("[bold blue]Running in DRY RUN mode - statements are not executed[/bold blue]")

        collector = QueryCollector(table_name=table_name)
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            TimeRemainingColumn(),
            console=console,
        ) as progress:
            task = progress.add_task(f"Inserting into {table_name}", total=df.height)

            def on_chunk(rows_in_chunk: int, affected: int) -> None:
                progress.advance(task, rows_in_chunk)

            rows = df.iter_rows(named=True)
            if dry_run:
                result = batch_insert(table_name, rows, chunk_size, collector, on_chunk=on_chunk)
            else:
                engine = create_engine(database_url)
                try:
                    with engine.begin() as connection:
                        result = batch_insert(
                            table_name, rows, chunk_size,
                            SQLAlchemyExecutor(connection), on_chunk=on_chunk
                        )
                finally:
                    engine.dispose()

        affected_rows = result[0] if result else 0

        if dry_run:
            stats = collector.get_stats()
            table = Table(title="Dry run summary")
            table.add_column("Statements", justify="right")
            table.add_column("Rows", justify="right")
            table.add_column("Parameters", justify="right")
            table.add_row(
                str(stats["total_queries"]),
                str(stats["total_row_count"]),
                str(stats["total_parameters"]),
            )
            console.print(table)
            if verbose and collector.queries:
                console.print(collector.queries[0]["statement"][:500], markup=False)
        else:
            console.print(f"[bold green]✓[/bold green] Inserted {affected_rows} rows into {table_name}")

    except BatchInsertError as e:
        logger.error(f"Batch insert failed: {str(e)}", exc_info=verbose)
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error loading CSV: {str(e)}", exc_info=True)
        console.print(f"[bold red]Error:[/bold red] Failed to load {csv_file}: {escape(str(e))}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
