# Backoffice/src/backoffice/services/orders.py
# @ai-rules:
# 1. [Single source]: total is computed here via calculate_total on create AND update. Repositories never recompute it.
# 2. [Cancel]: entregado and cancelado are terminal for cancel(). Every other estado may move to cancelado.
# 3. [Gotcha]: PUT is a merge, not a replace -- omitted fields keep their stored value and are not re-validated.
"""Order business rules."""

import logging

from ..errors import ConflictError, BusinessRuleError, NotFoundError, ValidationError
from ..models import Order, OrderCreate, OrderStatus, OrderUpdate, calculate_total
from ..repositories.orders import OrderRepository
from .validation import check_not_past, check_percentage, check_positive, provided_fields

logger = logging.getLogger(__name__)


def _validate_order_fields(fields: dict) -> None:
    """Validate whichever of the bounded order fields are present."""
    if "cantidad" in fields:
        check_positive("cantidad", fields["cantidad"])
    if "precio" in fields:
        check_positive("precio", fields["precio"])
    if "descuento" in fields:
        check_percentage(fields["descuento"])
    if "fecha_entrega" in fields:
        check_not_past("fechaEntrega", fields["fecha_entrega"])


def _check_cancellable(order: Order) -> None:
    if order.estado == OrderStatus.DELIVERED:
        raise BusinessRuleError("Cannot cancel an order that has already been delivered")
    if order.estado == OrderStatus.CANCELLED:
        raise BusinessRuleError("Order is already cancelled")


class OrderService:
    """Validates orders, keeps their totals consistent and guards the cancel transition."""

    def __init__(self, repository: OrderRepository):
        self.repository = repository

    def get_all(self) -> list[Order]:
        return self.repository.get_all()

    def get_by_id(self, order_id: str) -> Order:
        order = self.repository.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order with id {order_id} not found")
        return order

    def get_by_estado(self, estado: str) -> list[Order]:
        try:
            status = OrderStatus(estado)
        except ValueError:
            valid = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(f"Invalid estado '{estado}'. Must be one of: {valid}")
        return self.repository.get_by_estado(status)

    def create(self, data: OrderCreate) -> Order:
        descuento = data.descuento if data.descuento is not None else 0.0
        _validate_order_fields({
            "cantidad": data.cantidad,
            "precio": data.precio,
            "descuento": descuento,
            "fecha_entrega": data.fecha_entrega,
        })

        order = Order(
            producto=data.producto,
            descripcion=data.descripcion,
            cantidad=data.cantidad,
            precio=data.precio,
            descuento=descuento,
            total=calculate_total(data.precio, data.cantidad, descuento),
            cliente=data.cliente,
            estado=data.estado or OrderStatus.PENDING,
            fecha_entrega=data.fecha_entrega,
        )
        created = self.repository.create(order)
        logger.info(f"Order {created.id} created: {created.cantidad} x {created.producto.value}, total {created.total}")
        return created

    def update(self, order_id: str, patch: OrderUpdate) -> Order:
        existing = self.get_by_id(order_id)
        changes = provided_fields(patch)
        _validate_order_fields(changes)

        merged = existing.model_copy(update=changes)
        merged = merged.model_copy(update={
            "total": calculate_total(merged.precio, merged.cantidad, merged.descuento),
        })
        updated = self.repository.update(order_id, merged)
        if updated is None:
            raise NotFoundError(f"Order with id {order_id} not found")
        logger.info(f"Order {order_id} updated: fields {sorted(changes)}")
        return updated

    def delete(self, order_id: str) -> None:
        self.get_by_id(order_id)
        self.repository.delete(order_id)
        logger.info(f"Order {order_id} deleted")

    def cancel(self, order_id: str) -> Order:
        order = self.get_by_id(order_id)
        try:
            _check_cancellable(order)
        except BusinessRuleError as e:
            logger.warning(f"Order {order_id} not cancelled: {e.detail}")
            raise

        cancelled = self.repository.cancel(order_id)
        if cancelled is None:
            # Another writer changed the order between our read and the conditional update
            _check_cancellable(self.get_by_id(order_id))
            raise ConflictError(f"Order {order_id} was modified concurrently, retry the request")
        logger.info(f"Order {order_id} cancelled (was {order.estado.value})")
        return cancelled
