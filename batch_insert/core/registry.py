"""
Table metadata registry for schema-bound (entity) rows.

The registry maps SQLAlchemy mapped classes to the table they insert into and
the set of attributes that correspond to real columns of that table. It is
filled once at start-up and only read afterwards.
"""
import logging
from typing import Any, Dict, Iterator, Optional, Tuple, Type

from sqlalchemy import Column, inspect as sa_inspect
from sqlalchemy.orm import Mapper

from batch_insert.core.errors import RegistryFrozenError

logger = logging.getLogger(__name__)


class TableMetadata:
    """
    Table name and real columns of one mapped class.

    Attributes:
        name: Table name, schema-qualified when the table has a schema
        columns: Column names in table order
        attribute_columns: Mapped attribute key -> column name
    """

    def __init__(self, name: str, columns: Tuple[str, ...], attribute_columns: Dict[str, str]):
        self.name = name
        self.columns = columns
        self.attribute_columns = attribute_columns

    def has_column_attribute(self, key: str) -> bool:
        """Whether ``key`` is an attribute backed by a real column."""
        return key in self.attribute_columns

    def __repr__(self) -> str:
        return f"TableMetadata(name={self.name!r}, columns={self.columns!r})"


def describe_model(model: Type[Any], table_name: Optional[str] = None) -> TableMetadata:
    """
    Introspect a SQLAlchemy mapped class.

    Only column attributes whose column belongs to the mapped table are kept;
    SQL expression properties and relationships are left out.

    Args:
        model: Mapped class
        table_name: Override for the table name

    Returns:
        TableMetadata for the class

    Raises:
        ValueError: If the class is not mapped by SQLAlchemy
    """
    mapper = sa_inspect(model, raiseerr=False)
    if not isinstance(mapper, Mapper):
        raise ValueError(f"{model!r} is not a SQLAlchemy mapped class")

    table = mapper.local_table
    attribute_columns = {}
    for prop in mapper.column_attrs:
        column = prop.columns[0]
        if isinstance(column, Column) and column.table is table:
            attribute_columns[prop.key] = column.name

    return TableMetadata(
        name=table_name or table.fullname,
        columns=tuple(column.name for column in table.columns),
        attribute_columns=attribute_columns,
    )


class TableRegistry:
    """
    Registry of mapped classes and their table metadata.

    Register models during start-up, then call ``freeze()``; after that the
    registry is read-only and can be shared between callers.

    Example:
        >>> registry = TableRegistry()
        >>> registry.register_base(Base)
        >>> registry.freeze()
        >>> registry.lookup(User).name
        'users'
    """

    def __init__(self):
        self._tables: Dict[Type[Any], TableMetadata] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, model: Type[Any], table_name: Optional[str] = None) -> TableMetadata:
        """
        Register a mapped class.

        Args:
            model: SQLAlchemy mapped class
            table_name: Optional override for the table name

        Returns:
            The registered TableMetadata
        """
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register {model.__name__}: registry is frozen")

        metadata = describe_model(model, table_name)
        self._tables[model] = metadata
        logger.debug(f"Registered {model.__name__} -> {metadata.name} "
                     f"({len(metadata.attribute_columns)} column attributes)")
        return metadata

    def register_base(self, base: Any) -> int:
        """
        Register every class mapped by a declarative base.

        Args:
            base: Declarative base class (or Flask-SQLAlchemy ``db.Model``)

        Returns:
            Number of classes registered
        """
        count = 0
        for mapper in base.registry.mappers:
            self.register(mapper.class_)
            count += 1
        return count

    def freeze(self) -> None:
        """End the registration phase."""
        self._frozen = True
        logger.debug(f"Table registry frozen with {len(self._tables)} models")

    def lookup(self, model: Type[Any]) -> TableMetadata:
        """
        Get the metadata of a registered class or its nearest registered base.

        Raises:
            KeyError: If neither the class nor any of its bases is registered
        """
        for klass in model.__mro__:
            metadata = self._tables.get(klass)
            if metadata is not None:
                return metadata
        raise KeyError(f"{model.__name__} is not registered")

    def __contains__(self, model: Any) -> bool:
        if not isinstance(model, type):
            return False
        return any(klass in self._tables for klass in model.__mro__)

    def __iter__(self) -> Iterator[Type[Any]]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)
