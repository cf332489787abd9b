# Backoffice/src/backoffice/routes/orders.py
# @ai-rules:
# 1. [Access]: reads are public, every write (POST/PUT/DELETE/PATCH cancel) is admin-only.
# 2. [Route order]: /estado/{estado} is declared before /{order_id}.
"""Order endpoints."""

from fastapi import APIRouter, Depends, Request, Response

from ..models import Order, OrderCreate, OrderUpdate
from ..services.orders import OrderService
from .auth import require_admin

router = APIRouter(prefix="/orders", tags=["orders"])


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


@router.get("", response_model=list[Order])
def list_orders(service: OrderService = Depends(get_order_service)) -> list[Order]:
    """Return all orders, most recent first."""
    return service.get_all()


@router.get("/estado/{estado}", response_model=list[Order])
def list_orders_by_estado(estado: str, service: OrderService = Depends(get_order_service)) -> list[Order]:
    """Return orders in the given estado (pendiente, procesando, enviado, entregado, cancelado)."""
    return service.get_by_estado(estado)


@router.get("/{order_id}", response_model=Order)
def get_order(order_id: str, service: OrderService = Depends(get_order_service)) -> Order:
    return service.get_by_id(order_id)


@router.post("", response_model=Order, status_code=201, dependencies=[Depends(require_admin)])
def create_order(order_data: OrderCreate, service: OrderService = Depends(get_order_service)) -> Order:
    """Create an order. The total is computed from cantidad, precio and descuento."""
    return service.create(order_data)


@router.put("/{order_id}", response_model=Order, dependencies=[Depends(require_admin)])
def update_order(
    order_id: str, order_data: OrderUpdate, service: OrderService = Depends(get_order_service)
) -> Order:
    """Update an order. Omitted fields keep their current value; the total is recomputed."""
    return service.update(order_id, order_data)


@router.delete("/{order_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_order(order_id: str, service: OrderService = Depends(get_order_service)) -> Response:
    service.delete(order_id)
    return Response(status_code=204)


@router.patch("/{order_id}/cancel", response_model=Order, dependencies=[Depends(require_admin)])
def cancel_order(order_id: str, service: OrderService = Depends(get_order_service)) -> Order:
    """
    Cancel an order.

    Delivered and already-cancelled orders are rejected with 400.
    """
    return service.cancel(order_id)
