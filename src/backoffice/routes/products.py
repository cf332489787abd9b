# Backoffice/src/backoffice/routes/products.py
# @ai-rules:
# 1. [Pattern]: PUT is a partial update -- ProductUpdate with model_dump(exclude_unset=True), merged in the service.
# 2. [Access]: reads are public, writes are admin-only.
"""Product CRUD endpoints."""

from fastapi import APIRouter, Depends, Request, Response

from ..models import Product, ProductCreate, ProductUpdate
from ..services.products import ProductService
from .auth import require_admin

router = APIRouter(prefix="/products", tags=["products"])


def get_product_service(request: Request) -> ProductService:
    return request.app.state.product_service


@router.get("", response_model=list[Product])
def list_products(service: ProductService = Depends(get_product_service)) -> list[Product]:
    """List all products in the store."""
    return service.get_all()


@router.get("/{product_id}", response_model=Product)
def get_product(product_id: str, service: ProductService = Depends(get_product_service)) -> Product:
    """Get a single product by ID."""
    return service.get_by_id(product_id)


@router.post("", response_model=Product, status_code=201, dependencies=[Depends(require_admin)])
def create_product(product: ProductCreate, service: ProductService = Depends(get_product_service)) -> Product:
    """Create a new product."""
    return service.create(product)


@router.put("/{product_id}", response_model=Product, dependencies=[Depends(require_admin)])
def update_product(
    product_id: str, updates: ProductUpdate, service: ProductService = Depends(get_product_service)
) -> Product:
    """Update a product. Only provided fields are changed; omitted fields are preserved."""
    return service.update(product_id, updates)


@router.delete("/{product_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_product(product_id: str, service: ProductService = Depends(get_product_service)) -> Response:
    """Delete a product by ID."""
    service.delete(product_id)
    return Response(status_code=204)
