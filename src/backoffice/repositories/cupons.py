# Backoffice/src/backoffice/repositories/cupons.py
# @ai-rules:
# 1. [Pattern]: codigo is stored upper-cased; every lookup by codigo normalizes its argument the same way.
# 2. [Constraint]: increment_uso() is a single conditional UPDATE. Never read-then-write the counter.
# 3. [Gotcha]: UNIQUE(codigo) violations surface as ConflictError, not as a 500.
"""Coupon persistence: PostgreSQL and in-memory implementations."""

import uuid
from abc import ABC, abstractmethod
from typing import Optional

from psycopg2 import errors as pg_errors

from ..errors import ConflictError
from ..models import Cupon, normalize_codigo
from .memory import MemoryRepository
from .postgres import PostgresRepository, is_uuid


class CuponRepository(ABC):
    """Storage contract for coupons. Listings are newest first."""

    @abstractmethod
    def get_all(self) -> list[Cupon]: ...

    @abstractmethod
    def get_by_id(self, cupon_id: str) -> Optional[Cupon]: ...

    @abstractmethod
    def get_by_codigo(self, codigo: str) -> Optional[Cupon]: ...

    @abstractmethod
    def get_activos(self) -> list[Cupon]: ...

    @abstractmethod
    def create(self, cupon: Cupon) -> Cupon: ...

    @abstractmethod
    def update(self, cupon_id: str, cupon: Cupon) -> Optional[Cupon]: ...

    @abstractmethod
    def delete(self, cupon_id: str) -> None: ...

    @abstractmethod
    def increment_uso(self, cupon_id: str) -> Optional[Cupon]:
        """Add one use if the coupon is active and below usoMaximo; None otherwise."""


_CUPON_COLUMNS = (
    "id, codigo, descuento, fecha_expiracion, activo, uso_maximo, uso_actual, created_at"
)


def _row_to_cupon(row) -> Cupon:
    """Convert a DB row tuple to a Cupon model."""
    return Cupon(
        id=str(row[0]),
        codigo=row[1],
        descuento=row[2],
        fecha_expiracion=row[3],
        activo=row[4] if row[4] is not None else True,
        uso_maximo=row[5],
        uso_actual=row[6] if row[6] is not None else 0,
        created_at=row[7],
    )


class PostgresCuponRepository(PostgresRepository, CuponRepository):

    def get_all(self) -> list[Cupon]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_CUPON_COLUMNS} FROM cupons ORDER BY created_at DESC")
            return [_row_to_cupon(row) for row in cur.fetchall()]

    def get_by_id(self, cupon_id: str) -> Optional[Cupon]:
        if not is_uuid(cupon_id):
            return None
        with self._cursor() as cur:
            cur.execute(f"SELECT {_CUPON_COLUMNS} FROM cupons WHERE id = %s", (cupon_id,))
            row = cur.fetchone()
            return _row_to_cupon(row) if row else None

    def get_by_codigo(self, codigo: str) -> Optional[Cupon]:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {_CUPON_COLUMNS} FROM cupons WHERE codigo = %s",
                (normalize_codigo(codigo),)
            )
            row = cur.fetchone()
            return _row_to_cupon(row) if row else None

    def get_activos(self) -> list[Cupon]:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {_CUPON_COLUMNS} FROM cupons WHERE activo = TRUE ORDER BY created_at DESC"
            )
            return [_row_to_cupon(row) for row in cur.fetchall()]

    def create(self, cupon: Cupon) -> Cupon:
        cupon_id = str(uuid.uuid4())
        codigo = normalize_codigo(cupon.codigo)
        try:
            with self._cursor() as cur:
                cur.execute(
                    "INSERT INTO cupons (id, codigo, descuento, fecha_expiracion, activo, "
                    "uso_maximo, uso_actual) "
                    "VALUES (%s, %s, %s, %s, %s, %s, %s) RETURNING created_at",
                    (cupon_id, codigo, cupon.descuento, cupon.fecha_expiracion,
                     cupon.activo, cupon.uso_maximo, cupon.uso_actual)
                )
                created_at = cur.fetchone()[0]
        except pg_errors.UniqueViolation:
            raise ConflictError(f"Cupon with codigo {codigo} already exists")
        return cupon.model_copy(update={"id": cupon_id, "codigo": codigo, "created_at": created_at})

    def update(self, cupon_id: str, cupon: Cupon) -> Optional[Cupon]:
        if not is_uuid(cupon_id):
            return None
        codigo = normalize_codigo(cupon.codigo)
        try:
            with self._cursor() as cur:
                cur.execute(
                    "UPDATE cupons SET codigo = %s, descuento = %s, fecha_expiracion = %s, "
                    "activo = %s, uso_maximo = %s, uso_actual = %s "
                    f"WHERE id = %s RETURNING {_CUPON_COLUMNS}",
                    (codigo, cupon.descuento, cupon.fecha_expiracion, cupon.activo,
                     cupon.uso_maximo, cupon.uso_actual, cupon_id)
                )
                row = cur.fetchone()
        except pg_errors.UniqueViolation:
            raise ConflictError(f"Cupon with codigo {codigo} already exists")
        return _row_to_cupon(row) if row else None

    def delete(self, cupon_id: str) -> None:
        if not is_uuid(cupon_id):
            return
        with self._cursor() as cur:
            cur.execute("DELETE FROM cupons WHERE id = %s", (cupon_id,))

    def increment_uso(self, cupon_id: str) -> Optional[Cupon]:
        if not is_uuid(cupon_id):
            return None
        with self._cursor() as cur:
            cur.execute(
                "UPDATE cupons SET uso_actual = uso_actual + 1 "
                "WHERE id = %s AND activo = TRUE AND uso_actual < uso_maximo "
                f"RETURNING {_CUPON_COLUMNS}",
                (cupon_id,)
            )
            row = cur.fetchone()
            return _row_to_cupon(row) if row else None


class MemoryCuponRepository(MemoryRepository[Cupon], CuponRepository):

    def get_by_codigo(self, codigo: str) -> Optional[Cupon]:
        codigo = normalize_codigo(codigo)
        matches = self._all(lambda c: c.codigo == codigo)
        return matches[0] if matches else None

    def get_activos(self) -> list[Cupon]:
        return self._all(lambda c: c.activo)

    def create(self, cupon: Cupon) -> Cupon:
        codigo = normalize_codigo(cupon.codigo)
        with self._lock:
            if self.get_by_codigo(codigo) is not None:
                raise ConflictError(f"Cupon with codigo {codigo} already exists")
            return super().create(cupon.model_copy(update={"codigo": codigo}))

    def update(self, cupon_id: str, cupon: Cupon) -> Optional[Cupon]:
        codigo = normalize_codigo(cupon.codigo)
        with self._lock:
            existing = self.get_by_codigo(codigo)
            if existing is not None and existing.id != cupon_id:
                raise ConflictError(f"Cupon with codigo {codigo} already exists")
            return super().update(cupon_id, cupon.model_copy(update={"codigo": codigo}))

    def increment_uso(self, cupon_id: str) -> Optional[Cupon]:
        return self._conditional_update(
            cupon_id,
            lambda c: c.activo and c.uso_actual < c.uso_maximo,
            lambda c: {"uso_actual": c.uso_actual + 1},
        )
