"""
Basic usage example for Batch Insert.

Inserts mapping rows and SQLAlchemy entities into an in-memory SQLite
database, which accepts the same backtick-quoted multi-row INSERT syntax as
MySQL.
"""
import logging

from sqlalchemy import Column, Integer, String, create_engine, text
from sqlalchemy.orm import Session, declarative_base

from batch_insert import QueryCollector, TableRegistry, batch_insert
from batch_insert.connectors import SQLAlchemyExecutor

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

Base = declarative_base()


class Product(Base):
    __tablename__ = 'products'

    id = Column(Integer, primary_key=True)
    name = Column(String(64), nullable=False)
    price_cents = Column(Integer, nullable=False)


def main():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)

    # Mapping rows need an explicit table name
    rows = [{"id": i, "name": f"product {i}", "price_cents": 100 * i} for i in range(1, 2501)]

    # Dry run first to see how the rows are chunked
    collector = QueryCollector(table_name="products")
    batch_insert("products", rows, 1000, collector)
    print(f"Dry run: {collector.get_stats()}")

    with engine.begin() as connection:
        affected = batch_insert("products", rows, 1000, SQLAlchemyExecutor(connection))
    print(f"Inserted mapping rows: {affected}")

    # Entity rows take their table from the registry
    registry = TableRegistry()
    registry.register(Product)
    registry.freeze()

    products = [Product(id=i, name=f"product {i}", price_cents=50 * i) for i in range(2501, 2601)]
    with Session(engine) as session:
        affected = batch_insert(None, products, 40, SQLAlchemyExecutor(session), registry=registry)
        session.commit()
    print(f"Inserted entity rows: {affected}")

    with engine.connect() as connection:
        total = connection.execute(text("SELECT COUNT(*) FROM products")).scalar()
    print(f"Rows in table: {total}")


if __name__ == "__main__":
    main()
