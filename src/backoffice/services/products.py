# Backoffice/src/backoffice/services/products.py
"""Product catalog CRUD. Price and stock bounds are enforced by the request schemas."""

import logging

from ..errors import NotFoundError
from ..models import Product, ProductCreate, ProductUpdate
from ..repositories.products import ProductRepository
from .validation import provided_fields

logger = logging.getLogger(__name__)


class ProductService:

    def __init__(self, repository: ProductRepository):
        self.repository = repository

    def get_all(self) -> list[Product]:
        return self.repository.get_all()

    def get_by_id(self, product_id: str) -> Product:
        product = self.repository.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product with id {product_id} not found")
        return product

    def create(self, data: ProductCreate) -> Product:
        created = self.repository.create(Product(**data.model_dump()))
        logger.info(f"Product {created.id} created: {created.name}")
        return created

    def update(self, product_id: str, patch: ProductUpdate) -> Product:
        """Merge provided fields over the stored product; an empty patch returns it unchanged."""
        existing = self.get_by_id(product_id)
        changes = provided_fields(patch)
        if not changes:
            return existing
        updated = self.repository.update(product_id, existing.model_copy(update=changes))
        if updated is None:
            raise NotFoundError(f"Product with id {product_id} not found")
        return updated

    def delete(self, product_id: str) -> None:
        self.get_by_id(product_id)
        self.repository.delete(product_id)
        logger.info(f"Product {product_id} deleted")
