from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import Engine, Row, delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from products_api.core.logging import get_logger
from products_api.models import ProductRow
from products_api.storage import (
    Product,
    ProductInternalError,
    ProductNotFoundError,
    ProductNotUniqueError,
    ProductStorage,
)

logger = get_logger(__name__)

_products = ProductRow.__table__


def _encode(value: Any, null_zero_values: bool) -> Optional[Any]:
    # "", 0 and 0.0 are all falsy
    if null_zero_values and not value:
        return None
    return value


def _decode(row: Row) -> Product:
    try:
        return Product(
            id=int(row.id),
            name="" if row.name is None else str(row.name),
            type="" if row.type is None else str(row.type),
            count=0 if row.count is None else int(row.count),
            price=0.0 if row.price is None else float(row.price),
        )
    except (TypeError, ValueError) as e:
        raise ProductInternalError(f"cannot decode product row {row.id!r}") from e


class ProductStorageSQL(ProductStorage):
    """
    ProductStorage backed by the ``products`` table.

    The engine is owned by the caller. Each operation checks a connection out
    of its pool for one statement and gives it back on every exit path;
    writes run inside ``engine.begin()`` so they commit or roll back as a unit.
    """

    def __init__(self, engine: Engine, *, null_zero_values: bool = True) -> None:
        self._engine = engine
        self._null_zero_values = null_zero_values

    def _values(self, product: Product) -> dict[str, Any]:
        return {
            "name": _encode(product.name, self._null_zero_values),
            "type": _encode(product.type, self._null_zero_values),
            "count": _encode(product.count, self._null_zero_values),
            "price": _encode(product.price, self._null_zero_values),
        }

    def fetch_by_id(self, product_id: int) -> Product:
        stmt = select(
            _products.c.id,
            _products.c.name,
            _products.c.type,
            _products.c.count,
            _products.c.price,
        ).where(_products.c.id == product_id)

        try:
            with self._engine.connect() as conn:
                row = conn.execute(stmt).first()
        except (SQLAlchemyError, OverflowError, ValueError) as e:
            logger.exception("fetch product id=%s failed", product_id)
            raise ProductInternalError(f"fetch product {product_id}: {e}") from e

        if row is None:
            logger.warning("product id=%s not found", product_id)
            raise ProductNotFoundError(f"product {product_id} not found")

        return _decode(row)

    def insert(self, product: Product) -> None:
        stmt = insert(_products).values(**self._values(product))

        try:
            with self._engine.begin() as conn:
                result = conn.execute(stmt)
                if result.rowcount != 1:
                    raise ProductInternalError(f"insert product: rows affected {result.rowcount} != 1")
                new_id = result.inserted_primary_key[0]
        except IntegrityError as e:
            logger.warning("insert product name=%r violates a constraint", product.name)
            raise ProductNotUniqueError(f"product {product.name!r} not unique") from e
        except (SQLAlchemyError, OverflowError, ValueError) as e:
            logger.exception("insert product name=%r failed", product.name)
            raise ProductInternalError(f"insert product: {e}") from e

        product.id = int(new_id)

    def update(self, product: Product) -> None:
        stmt = (
            update(_products)
            .where(_products.c.id == product.id)
            .values(**self._values(product))
        )

        try:
            with self._engine.begin() as conn:
                result = conn.execute(stmt)
                if result.rowcount != 1:
                    # primary key match: anything but one row means it is gone
                    logger.warning("update product id=%s: rows affected %s", product.id, result.rowcount)
                    raise ProductNotFoundError(f"product {product.id} not found")
        except IntegrityError as e:
            logger.warning("update product id=%s violates a constraint", product.id)
            raise ProductNotUniqueError(f"product {product.name!r} not unique") from e
        except (SQLAlchemyError, OverflowError, ValueError) as e:
            logger.exception("update product id=%s failed", product.id)
            raise ProductInternalError(f"update product {product.id}: {e}") from e

    def delete(self, product_id: int) -> None:
        stmt = delete(_products).where(_products.c.id == product_id)

        try:
            with self._engine.begin() as conn:
                result = conn.execute(stmt)
                if result.rowcount != 1:
                    logger.warning("delete product id=%s: rows affected %s", product_id, result.rowcount)
                    raise ProductNotFoundError(f"product {product_id} not found")
        except (SQLAlchemyError, OverflowError, ValueError) as e:
            logger.exception("delete product id=%s failed", product_id)
            raise ProductInternalError(f"delete product {product_id}: {e}") from e
