"""
The two row shapes accepted by the compositor.

A row is either a schema-less mapping of column name to value, or an instance
of a registered SQLAlchemy mapped class. ``as_row`` is the single place where
raw objects are turned into one of the two cases; everything downstream only
talks to the ``Row`` interface.
"""
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm.exc import DetachedInstanceError, ObjectDeletedError

from batch_insert.core.errors import UnsupportedRowShape
from batch_insert.core.registry import TableMetadata, TableRegistry

MAPPING = "mapping"
ENTITY = "entity"


class Row(ABC):
    """A record to insert, with column discovery and value lookup."""

    kind: str

    @abstractmethod
    def columns(self) -> List[str]:
        """Column names supplied by this row, in insertion order."""

    @abstractmethod
    def value(self, column: str) -> Any:
        """Value stored for ``column`` (possibly None)."""

    @property
    def shape(self) -> tuple:
        """Key identifying the shape; rows of one batch must share it."""
        return (self.kind,)


class MappingRow(Row):
    """Schema-less row backed by a mapping; columns follow key order."""

    kind = MAPPING

    def __init__(self, data: Mapping):
        self.data = data

    def columns(self) -> List[str]:
        columns = list(self.data.keys())
        for column in columns:
            if not isinstance(column, str):
                raise UnsupportedRowShape(
                    f"Column names must be strings, got {type(column).__name__} {column!r}"
                )
        return columns

    def value(self, column: str) -> Any:
        try:
            return self.data[column]
        except KeyError:
            raise UnsupportedRowShape(f"Row has no value for column {column!r}") from None


class EntityRow(Row):
    """
    Schema-bound row backed by a mapped instance.

    Only attributes that map to a real column of the table are treated as
    columns; transient attributes and SQL expression properties are skipped.
    A new instance supplies the attributes assigned on it, in assignment
    order. An instance with an identity (persistent or detached) supplies
    every column attribute in table order, loading expired or deferred ones
    first.
    """

    kind = ENTITY

    def __init__(self, entity: Any, metadata: TableMetadata):
        self.entity = entity
        self.metadata = metadata
        state = sa_inspect(entity)
        if state.has_identity:
            self._attrs = self._load_column_attributes(entity, state, metadata)
        else:
            self._attrs = state.dict
        self._keys_by_column = {
            column: key for key, column in metadata.attribute_columns.items()
        }
        if not self.columns():
            raise UnsupportedRowShape(
                f"{type(entity).__name__} instance has no column attributes set"
            )

    @staticmethod
    def _load_column_attributes(entity: Any, state: Any, metadata: TableMetadata) -> Dict[str, Any]:
        attrs = {}
        for key in metadata.attribute_columns:
            try:
                attrs[key] = getattr(entity, key)
            except (DetachedInstanceError, ObjectDeletedError) as e:
                raise UnsupportedRowShape(
                    f"Cannot load attribute {key!r} of {type(entity).__name__}: {e}"
                ) from e
            if key in state.unloaded:
                raise UnsupportedRowShape(
                    f"Attribute {key!r} of {type(entity).__name__} is not loaded"
                )
        return attrs

    @property
    def shape(self) -> tuple:
        return (self.kind, type(self.entity))

    def columns(self) -> List[str]:
        return [
            self.metadata.attribute_columns[key]
            for key in self._attrs
            if self.metadata.has_column_attribute(key)
        ]

    def value(self, column: str) -> Any:
        key = self._keys_by_column.get(column)
        if key is None or key not in self._attrs:
            raise UnsupportedRowShape(
                f"{type(self.entity).__name__} has no value for column {column!r}"
            )
        return self._attrs[key]


def as_row(obj: Any, registry: Optional[TableRegistry] = None) -> Row:
    """
    Wrap a raw row object into its row shape.

    Args:
        obj: A mapping, or an instance of a class registered in ``registry``
        registry: Table registry used to resolve entity rows

    Returns:
        MappingRow or EntityRow

    Raises:
        UnsupportedRowShape: If the object is neither shape
    """
    if isinstance(obj, Row):
        return obj
    if isinstance(obj, Mapping):
        return MappingRow(obj)
    if registry is not None and type(obj) in registry:
        return EntityRow(obj, registry.lookup(type(obj)))

    if registry is None:
        reason = "no table registry was supplied for entity rows"
    else:
        reason = f"{type(obj).__name__} is not registered"
    raise UnsupportedRowShape(
        f"Unsupported row type {type(obj).__name__}: expected a mapping or a "
        f"registered entity ({reason})"
    )
