# Backoffice/src/backoffice/repositories/products.py
"""Product persistence: PostgreSQL and in-memory implementations."""

import uuid
from abc import ABC, abstractmethod
from typing import Optional

from ..models import Product
from .memory import MemoryRepository
from .postgres import PostgresRepository, is_uuid


class ProductRepository(ABC):
    """Storage contract for products. Listings are newest first."""

    @abstractmethod
    def get_all(self) -> list[Product]: ...

    @abstractmethod
    def get_by_id(self, product_id: str) -> Optional[Product]: ...

    @abstractmethod
    def create(self, product: Product) -> Product: ...

    @abstractmethod
    def update(self, product_id: str, product: Product) -> Optional[Product]: ...

    @abstractmethod
    def delete(self, product_id: str) -> None: ...


_PRODUCT_COLUMNS = "id, name, description, price, stock, category, marca, image_url, created_at"


def _row_to_product(row) -> Product:
    return Product(
        id=str(row[0]),
        name=row[1],
        description=row[2] if row[2] is not None else "",
        price=row[3],
        stock=row[4],
        category=row[5],
        marca=row[6],
        image_url=row[7],
        created_at=row[8],
    )


class PostgresProductRepository(PostgresRepository, ProductRepository):

    def get_all(self) -> list[Product]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_PRODUCT_COLUMNS} FROM products ORDER BY created_at DESC")
            return [_row_to_product(row) for row in cur.fetchall()]

    def get_by_id(self, product_id: str) -> Optional[Product]:
        if not is_uuid(product_id):
            return None
        with self._cursor() as cur:
            cur.execute(f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE id = %s", (product_id,))
            row = cur.fetchone()
            return _row_to_product(row) if row else None

    def create(self, product: Product) -> Product:
        product_id = str(uuid.uuid4())
        with self._cursor() as cur:
            cur.execute(
                "INSERT INTO products (id, name, description, price, stock, category, marca, image_url) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s) RETURNING created_at",
                (product_id, product.name, product.description, product.price, product.stock,
                 product.category, product.marca, product.image_url)
            )
            created_at = cur.fetchone()[0]
        return product.model_copy(update={"id": product_id, "created_at": created_at})

    def update(self, product_id: str, product: Product) -> Optional[Product]:
        if not is_uuid(product_id):
            return None
        with self._cursor() as cur:
            cur.execute(
                f"""
                UPDATE products
                SET name = %s, description = %s, price = %s, stock = %s,
                    category = %s, marca = %s, image_url = %s
                WHERE id = %s
                RETURNING {_PRODUCT_COLUMNS}
                """,
                (product.name, product.description, product.price, product.stock,
                 product.category, product.marca, product.image_url, product_id)
            )
            row = cur.fetchone()
            return _row_to_product(row) if row else None

    def delete(self, product_id: str) -> None:
        if not is_uuid(product_id):
            return
        with self._cursor() as cur:
            cur.execute("DELETE FROM products WHERE id = %s", (product_id,))


class MemoryProductRepository(MemoryRepository[Product], ProductRepository):
    pass
