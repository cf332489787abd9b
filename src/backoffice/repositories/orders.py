# Backoffice/src/backoffice/repositories/orders.py
# @ai-rules:
# 1. [Pattern]: Repositories persist the total they are given. OrderService (via models.calculate_total) is the single source.
# 2. [Constraint]: cancel() is a conditional UPDATE -- it only matches rows whose estado is still cancellable.
"""Order persistence: PostgreSQL and in-memory implementations."""

import uuid
from abc import ABC, abstractmethod
from typing import Optional

from ..models import NON_CANCELLABLE_STATUSES, Order, OrderStatus
from .memory import MemoryRepository
from .postgres import PostgresRepository, is_uuid


class OrderRepository(ABC):
    """Storage contract for orders. Listings are newest first."""

    @abstractmethod
    def get_all(self) -> list[Order]: ...

    @abstractmethod
    def get_by_id(self, order_id: str) -> Optional[Order]: ...

    @abstractmethod
    def get_by_estado(self, estado: OrderStatus) -> list[Order]: ...

    @abstractmethod
    def create(self, order: Order) -> Order: ...

    @abstractmethod
    def update(self, order_id: str, order: Order) -> Optional[Order]: ...

    @abstractmethod
    def delete(self, order_id: str) -> None: ...

    @abstractmethod
    def cancel(self, order_id: str) -> Optional[Order]:
        """Set estado to cancelado unless the order is missing, delivered or already cancelled."""


_ORDER_COLUMNS = (
    "id, producto, descripcion, cantidad, precio, descuento, total, "
    "cliente, estado, fecha_entrega, created_at"
)

_NON_CANCELLABLE = tuple(s.value for s in NON_CANCELLABLE_STATUSES)


def _row_to_order(row) -> Order:
    """Convert a DB row tuple to an Order model."""
    return Order(
        id=str(row[0]),
        producto=row[1],
        descripcion=row[2],
        cantidad=row[3],
        precio=row[4],
        descuento=row[5] if row[5] is not None else 0.0,
        total=row[6],
        cliente=row[7],
        estado=row[8],
        fecha_entrega=row[9],
        created_at=row[10],
    )


class PostgresOrderRepository(PostgresRepository, OrderRepository):

    def get_all(self) -> list[Order]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_ORDER_COLUMNS} FROM orders ORDER BY created_at DESC")
            return [_row_to_order(row) for row in cur.fetchall()]

    def get_by_id(self, order_id: str) -> Optional[Order]:
        if not is_uuid(order_id):
            return None
        with self._cursor() as cur:
            cur.execute(f"SELECT {_ORDER_COLUMNS} FROM orders WHERE id = %s", (order_id,))
            row = cur.fetchone()
            return _row_to_order(row) if row else None

    def get_by_estado(self, estado: OrderStatus) -> list[Order]:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {_ORDER_COLUMNS} FROM orders WHERE estado = %s ORDER BY created_at DESC",
                (OrderStatus(estado).value,)
            )
            return [_row_to_order(row) for row in cur.fetchall()]

    def create(self, order: Order) -> Order:
        order_id = str(uuid.uuid4())
        with self._cursor() as cur:
            cur.execute(
                "INSERT INTO orders (id, producto, descripcion, cantidad, precio, descuento, "
                "total, cliente, estado, fecha_entrega) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s) RETURNING created_at",
                (order_id, order.producto.value, order.descripcion, order.cantidad,
                 order.precio, order.descuento, order.total, order.cliente,
                 order.estado.value, order.fecha_entrega)
            )
            created_at = cur.fetchone()[0]
        return order.model_copy(update={"id": order_id, "created_at": created_at})

    def update(self, order_id: str, order: Order) -> Optional[Order]:
        if not is_uuid(order_id):
            return None
        with self._cursor() as cur:
            cur.execute(
                "UPDATE orders SET producto = %s, descripcion = %s, cantidad = %s, precio = %s, "
                "descuento = %s, total = %s, cliente = %s, estado = %s, fecha_entrega = %s "
                f"WHERE id = %s RETURNING {_ORDER_COLUMNS}",
                (order.producto.value, order.descripcion, order.cantidad, order.precio,
                 order.descuento, order.total, order.cliente, order.estado.value,
                 order.fecha_entrega, order_id)
            )
            row = cur.fetchone()
            return _row_to_order(row) if row else None

    def delete(self, order_id: str) -> None:
        if not is_uuid(order_id):
            return
        with self._cursor() as cur:
            cur.execute("DELETE FROM orders WHERE id = %s", (order_id,))

    def cancel(self, order_id: str) -> Optional[Order]:
        if not is_uuid(order_id):
            return None
        with self._cursor() as cur:
            cur.execute(
                "UPDATE orders SET estado = %s WHERE id = %s AND estado NOT IN %s "
                f"RETURNING {_ORDER_COLUMNS}",
                (OrderStatus.CANCELLED.value, order_id, _NON_CANCELLABLE)
            )
            row = cur.fetchone()
            return _row_to_order(row) if row else None


class MemoryOrderRepository(MemoryRepository[Order], OrderRepository):

    def get_by_estado(self, estado: OrderStatus) -> list[Order]:
        return self._all(lambda o: o.estado == estado)

    def cancel(self, order_id: str) -> Optional[Order]:
        return self._conditional_update(
            order_id,
            lambda o: o.estado not in NON_CANCELLABLE_STATUSES,
            lambda o: {"estado": OrderStatus.CANCELLED},
        )
