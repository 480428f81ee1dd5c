"""
Unit tests for row shapes and the table registry.
"""
import unittest
from unittest import mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, defer

from batch_insert import batch_insert
from batch_insert.core.errors import RegistryFrozenError, RowShapeMismatch, UnsupportedRowShape
from batch_insert.core.registry import TableRegistry, describe_model
from batch_insert.core.rows import ENTITY, MAPPING, EntityRow, MappingRow, as_row

from sample_models import Base, NotMapped, Order, User


@pytest.mark.core
class TestTableRegistry(unittest.TestCase):
    """Test cases for TableRegistry."""

    def test_describe_model(self):
        """Only real columns of the mapped table are described."""
        metadata = describe_model(User)

        self.assertEqual(metadata.name, "users")
        self.assertEqual(metadata.columns, ("id", "name", "email_address"))
        self.assertEqual(
            metadata.attribute_columns,
            {"id": "id", "name": "name", "email": "email_address"},
        )
        self.assertFalse(metadata.has_column_attribute("name_upper"))

    def test_describe_unmapped_class(self):
        """Classes SQLAlchemy does not map are rejected."""
        with self.assertRaises(ValueError):
            describe_model(NotMapped)

    def test_register_and_lookup(self):
        """Registered models can be looked up."""
        registry = TableRegistry()
        registry.register(User)
        registry.register(Order, table_name="shop.orders")

        self.assertIn(User, registry)
        self.assertNotIn(NotMapped, registry)
        self.assertNotIn(User(), registry)
        self.assertEqual(registry.lookup(Order).name, "shop.orders")
        with self.assertRaises(KeyError):
            registry.lookup(NotMapped)

    def test_register_base(self):
        """register_base picks up every mapped class of the base."""
        registry = TableRegistry()

        count = registry.register_base(Base)

        self.assertEqual(count, 2)
        self.assertEqual(len(registry), 2)
        self.assertEqual(set(registry), {User, Order})

    def test_freeze(self):
        """A frozen registry can be read but not extended."""
        registry = TableRegistry()
        registry.register(User)
        registry.freeze()

        self.assertTrue(registry.frozen)
        self.assertEqual(registry.lookup(User).name, "users")
        with self.assertRaises(RegistryFrozenError):
            registry.register(Order)


@pytest.mark.core
class TestRowShapes(unittest.TestCase):
    """Test cases for MappingRow, EntityRow and as_row."""

    def setUp(self):
        self.registry = TableRegistry()
        self.registry.register_base(Base)
        self.registry.freeze()

    def test_mapping_row(self):
        row = as_row({"b": 2, "a": 1})

        self.assertIsInstance(row, MappingRow)
        self.assertEqual(row.kind, MAPPING)
        self.assertEqual(row.columns(), ["b", "a"])
        self.assertEqual(row.value("a"), 1)
        with self.assertRaises(UnsupportedRowShape):
            row.value("missing")

    def test_entity_row_filters_non_columns(self):
        """Transient attributes never become columns."""
        user = User(id=1, name="Alice", email="alice@example.com")
        user.display_label = "Alice <alice@example.com>"

        row = as_row(user, self.registry)

        self.assertIsInstance(row, EntityRow)
        self.assertEqual(row.kind, ENTITY)
        self.assertEqual(row.columns(), ["id", "name", "email_address"])
        self.assertEqual(row.value("email_address"), "alice@example.com")
        with self.assertRaises(UnsupportedRowShape):
            row.value("display_label")

    def test_entity_row_uses_assignment_order(self):
        """Entity columns follow the order attributes were assigned in."""
        user = User(name="Bob", id=2)

        row = as_row(user, self.registry)

        self.assertEqual(row.columns(), ["name", "id"])

    def test_entity_without_registry(self):
        with self.assertRaises(UnsupportedRowShape):
            as_row(User(id=1, name="a"))

    def test_unregistered_object(self):
        with self.assertRaises(UnsupportedRowShape):
            as_row(NotMapped(id=1), self.registry)

    def test_wrapped_row_passes_through(self):
        row = MappingRow({"a": 1})
        self.assertIs(as_row(row), row)


@pytest.mark.core
class TestEntityBatchInsert(unittest.TestCase):
    """Test cases for inserting entity rows."""

    def setUp(self):
        self.registry = TableRegistry()
        self.registry.register_base(Base)
        self.registry.freeze()
        self.executor = mock.Mock(side_effect=lambda statement, params: statement.count("(?"))

    def test_table_name_from_registry(self):
        users = [User(id=i, name=f"user{i}") for i in range(1, 4)]

        result = batch_insert(None, users, 2, self.executor, registry=self.registry)

        self.assertEqual(result, [3])
        first = self.executor.call_args_list[0]
        self.assertEqual(
            first.args[0],
            "INSERT INTO `users` (`id`, `name`) VALUES (?, ?), (?, ?)",
        )
        self.assertEqual(first.args[1], [1, "user1", 2, "user2"])

    def test_explicit_table_name_wins(self):
        users = [User(id=1, name="a")]

        batch_insert("users_archive", users, 2, self.executor, registry=self.registry)

        self.assertTrue(self.executor.call_args.args[0].startswith("INSERT INTO `users_archive`"))

    def test_non_column_attribute_excluded(self):
        """Non-column attributes appear in neither the header nor the parameters."""
        users = []
        for i in range(1, 3):
            user = User(id=i, name=f"user{i}", email=f"user{i}@example.com")
            user.display_label = f"label{i}"
            users.append(user)

        batch_insert(None, users, 10, self.executor, registry=self.registry)

        statement, params = self.executor.call_args.args
        self.assertIn("(`id`, `name`, `email_address`)", statement)
        self.assertNotIn("display_label", statement)
        self.assertEqual(
            params,
            [1, "user1", "user1@example.com", 2, "user2", "user2@example.com"],
        )

    def test_mixed_shapes_rejected(self):
        """A mapping row after an entity row is a shape mismatch."""
        rows = [User(id=1, name="a"), {"id": 2, "name": "b"}]

        with self.assertRaises(RowShapeMismatch):
            batch_insert(None, rows, 10, self.executor, registry=self.registry)

        self.executor.assert_not_called()

    def test_mixed_entity_classes_rejected(self):
        rows = [User(id=1), Order(id=1)]

        with self.assertRaises(RowShapeMismatch):
            batch_insert(None, rows, 10, self.executor, registry=self.registry)

    def test_entity_without_column_attributes_rejected(self):
        """An entity with nothing assigned cannot be inserted."""
        with self.assertRaises(UnsupportedRowShape):
            batch_insert("users", [User()], 10, self.executor, registry=self.registry)

        self.executor.assert_not_called()

    def test_entity_with_unassigned_column_rejected(self):
        """Every entity must supply every column discovered from the first one."""
        rows = [User(id=1, name="a", email="a@x"), User(id=2, name="b")]

        with self.assertRaises(RowShapeMismatch):
            batch_insert(None, rows, 10, self.executor, registry=self.registry)


@pytest.mark.db
class TestPersistentEntityRows(unittest.TestCase):
    """Test cases for entities already loaded through a session."""

    def setUp(self):
        self.engine = create_engine("sqlite://")
        Base.metadata.create_all(self.engine)
        self.registry = TableRegistry()
        self.registry.register_base(Base)
        self.registry.freeze()
        self.executor = mock.Mock(side_effect=lambda statement, params: statement.count("(?"))
        with Session(self.engine) as session:
            session.add_all([
                User(id=1, name="Alice", email="alice@example.com"),
                User(id=2, name="Bob"),
            ])
            session.commit()

    def tearDown(self):
        self.engine.dispose()

    def test_expired_entities_after_commit(self):
        """Attributes expired by a commit are loaded again, not dropped."""
        with Session(self.engine) as session:
            users = session.query(User).order_by(User.id).all()
            session.commit()

            result = batch_insert("users_archive", users, 10, self.executor, registry=self.registry)

        self.assertEqual(result, [2])
        self.executor.assert_called_once_with(
            "INSERT INTO `users_archive` (`id`, `name`, `email_address`) VALUES (?, ?, ?), (?, ?, ?)",
            [1, "Alice", "alice@example.com", 2, "Bob", None],
        )

    def test_deferred_column_is_loaded(self):
        with Session(self.engine) as session:
            user = session.query(User).options(defer(User.email)).filter_by(id=1).one()

            row = as_row(user, self.registry)

        self.assertEqual(row.columns(), ["id", "name", "email_address"])
        self.assertEqual(row.value("email_address"), "alice@example.com")

    def test_detached_expired_entity_rejected(self):
        """An expired entity outside its session has no values to insert."""
        with Session(self.engine) as session:
            user = session.get(User, 1)
            session.commit()

        with self.assertRaises(UnsupportedRowShape):
            batch_insert("users_archive", [user], 10, self.executor, registry=self.registry)

        self.executor.assert_not_called()

    def test_detached_loaded_entity(self):
        with Session(self.engine, expire_on_commit=False) as session:
            user = session.get(User, 2)

        row = as_row(user, self.registry)

        self.assertEqual(row.columns(), ["id", "name", "email_address"])
        self.assertIsNone(row.value("email_address"))


if __name__ == "__main__":
    unittest.main()
