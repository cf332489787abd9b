# Backoffice/src/backoffice/services/cupons.py
# @ai-rules:
# 1. [Use order]: use() checks inactive -> expired -> max uses, in that order. Tests depend on the first failing reason.
# 2. [Atomic]: the counter only moves through repository.increment_uso(). Do not write uso_actual from here.
# 3. [Codigo]: codes are compared upper-cased; create and update both reject duplicates with 409.
"""Coupon business rules."""

import logging

from ..errors import BusinessRuleError, ConflictError, NotFoundError, ValidationError
from ..models import Cupon, CuponCreate, CuponUpdate, normalize_codigo
from ..repositories.cupons import CuponRepository
from .validation import check_not_past, check_percentage, check_positive, is_expired, provided_fields

logger = logging.getLogger(__name__)


def _validate_cupon_fields(fields: dict) -> None:
    if "descuento" in fields:
        check_percentage(fields["descuento"])
    if "uso_maximo" in fields:
        check_positive("usoMaximo", fields["uso_maximo"])
    if "fecha_expiracion" in fields:
        check_not_past("fechaExpiracion", fields["fecha_expiracion"])


def _check_usable(cupon: Cupon) -> None:
    if not cupon.activo:
        raise BusinessRuleError("Cupon is not active")
    if is_expired(cupon.fecha_expiracion):
        raise BusinessRuleError("Cupon has expired")
    if cupon.uso_actual >= cupon.uso_maximo:
        raise BusinessRuleError("Cupon has reached maximum uses")


class CuponService:
    """
    Coupon lifecycle: creation with unique codes, partial updates,
    consumption against a usage ceiling, and enable/disable toggles.
    """

    def __init__(self, repository: CuponRepository):
        self.repository = repository

    def get_all(self) -> list[Cupon]:
        return self.repository.get_all()

    def get_by_id(self, cupon_id: str) -> Cupon:
        cupon = self.repository.get_by_id(cupon_id)
        if cupon is None:
            raise NotFoundError(f"Cupon with id {cupon_id} not found")
        return cupon

    def get_by_codigo(self, codigo: str) -> Cupon:
        cupon = self.repository.get_by_codigo(codigo)
        if cupon is None:
            raise NotFoundError(f"Cupon with codigo {normalize_codigo(codigo)} not found")
        return cupon

    def get_active(self) -> list[Cupon]:
        return self.repository.get_activos()

    def create(self, data: CuponCreate) -> Cupon:
        _validate_cupon_fields({
            "descuento": data.descuento,
            "uso_maximo": data.uso_maximo,
            "fecha_expiracion": data.fecha_expiracion,
        })

        codigo = normalize_codigo(data.codigo)
        if self.repository.get_by_codigo(codigo) is not None:
            raise ConflictError(f"Cupon with codigo {codigo} already exists")

        cupon = Cupon(
            codigo=codigo,
            descuento=data.descuento,
            fecha_expiracion=data.fecha_expiracion,
            activo=data.activo if data.activo is not None else True,
            uso_maximo=data.uso_maximo,
            uso_actual=0,
        )
        created = self.repository.create(cupon)
        logger.info(f"Cupon {created.codigo} created ({created.descuento}% off, max {created.uso_maximo} uses)")
        return created

    def update(self, cupon_id: str, patch: CuponUpdate) -> Cupon:
        existing = self.get_by_id(cupon_id)
        changes = provided_fields(patch)
        _validate_cupon_fields(changes)

        if "codigo" in changes:
            changes["codigo"] = normalize_codigo(changes["codigo"])
            if changes["codigo"] != existing.codigo:
                other = self.repository.get_by_codigo(changes["codigo"])
                if other is not None and other.id != cupon_id:
                    raise ConflictError(f"Cupon with codigo {changes['codigo']} already exists")

        merged = existing.model_copy(update=changes)
        if "uso_actual" in changes and not 0 <= merged.uso_actual <= merged.uso_maximo:
            raise ValidationError("usoActual must be between 0 and usoMaximo")

        updated = self.repository.update(cupon_id, merged)
        if updated is None:
            raise NotFoundError(f"Cupon with id {cupon_id} not found")
        logger.info(f"Cupon {updated.codigo} updated: fields {sorted(changes)}")
        return updated

    def delete(self, cupon_id: str) -> None:
        cupon = self.get_by_id(cupon_id)
        self.repository.delete(cupon_id)
        logger.info(f"Cupon {cupon.codigo} deleted")

    def use(self, codigo: str) -> Cupon:
        """Consume one use of the coupon identified by codigo."""
        cupon = self.get_by_codigo(codigo)
        try:
            _check_usable(cupon)
        except BusinessRuleError as e:
            logger.warning(f"Cupon {cupon.codigo} rejected: {e.detail}")
            raise

        used = self.repository.increment_uso(cupon.id)
        if used is None:
            # The conditional increment lost a race; report against fresh state
            _check_usable(self.get_by_codigo(codigo))
            raise ConflictError(f"Cupon {cupon.codigo} was modified concurrently, retry the request")
        logger.info(f"Cupon {used.codigo} used ({used.uso_actual}/{used.uso_maximo})")
        return used

    def disable(self, cupon_id: str) -> Cupon:
        cupon = self.get_by_id(cupon_id)
        if not cupon.activo:
            raise BusinessRuleError("Cupon is already disabled")
        return self._set_activo(cupon, False)

    def enable(self, cupon_id: str) -> Cupon:
        cupon = self.get_by_id(cupon_id)
        if cupon.activo:
            raise BusinessRuleError("Cupon is already enabled")
        return self._set_activo(cupon, True)

    def _set_activo(self, cupon: Cupon, activo: bool) -> Cupon:
        updated = self.repository.update(cupon.id, cupon.model_copy(update={"activo": activo}))
        if updated is None:
            raise NotFoundError(f"Cupon with id {cupon.id} not found")
        logger.info(f"Cupon {cupon.codigo} {'enabled' if activo else 'disabled'}")
        return updated
