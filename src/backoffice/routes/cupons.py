# Backoffice/src/backoffice/routes/cupons.py
# @ai-rules:
# 1. [Route order]: /activos and /codigo/{codigo} must be declared before /{cupon_id} or they are shadowed.
# 2. [Access]: listing, lookup by id and every mutation except /usar are admin-only. Reads by codigo and /usar are public.
# 3. [Pattern]: Handlers only translate HTTP <-> service. Errors are StoreError subclasses mapped in main.py.
"""Coupon endpoints."""

from fastapi import APIRouter, Depends, Request, Response

from ..models import Cupon, CuponCreate, CuponUpdate
from ..services.cupons import CuponService
from .auth import require_admin

router = APIRouter(prefix="/cupons", tags=["cupons"])


def get_cupon_service(request: Request) -> CuponService:
    return request.app.state.cupon_service


@router.get("", response_model=list[Cupon], dependencies=[Depends(require_admin)])
def list_cupons(service: CuponService = Depends(get_cupon_service)) -> list[Cupon]:
    """List all coupons, newest first."""
    return service.get_all()


@router.get("/activos", response_model=list[Cupon])
def list_active_cupons(service: CuponService = Depends(get_cupon_service)) -> list[Cupon]:
    """List coupons that are currently enabled."""
    return service.get_active()


@router.get("/codigo/{codigo}", response_model=Cupon)
def get_cupon_by_codigo(codigo: str, service: CuponService = Depends(get_cupon_service)) -> Cupon:
    """Look up a coupon by its code (case-insensitive)."""
    return service.get_by_codigo(codigo)


@router.get("/{cupon_id}", response_model=Cupon, dependencies=[Depends(require_admin)])
def get_cupon(cupon_id: str, service: CuponService = Depends(get_cupon_service)) -> Cupon:
    return service.get_by_id(cupon_id)


@router.post("", response_model=Cupon, status_code=201, dependencies=[Depends(require_admin)])
def create_cupon(cupon_data: CuponCreate, service: CuponService = Depends(get_cupon_service)) -> Cupon:
    """Create a coupon. The code is stored upper-cased and starts with zero uses."""
    return service.create(cupon_data)


@router.put("/{cupon_id}", response_model=Cupon, dependencies=[Depends(require_admin)])
def update_cupon(
    cupon_id: str, cupon_data: CuponUpdate, service: CuponService = Depends(get_cupon_service)
) -> Cupon:
    """Update a coupon. Omitted fields keep their current value."""
    return service.update(cupon_id, cupon_data)


@router.delete("/{cupon_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_cupon(cupon_id: str, service: CuponService = Depends(get_cupon_service)) -> Response:
    service.delete(cupon_id)
    return Response(status_code=204)


@router.post("/{codigo}/usar", response_model=Cupon)
def use_cupon(codigo: str, service: CuponService = Depends(get_cupon_service)) -> Cupon:
    """Consume one use of a coupon."""
    return service.use(codigo)


@router.patch("/{cupon_id}/deshabilitar", response_model=Cupon, dependencies=[Depends(require_admin)])
def disable_cupon(cupon_id: str, service: CuponService = Depends(get_cupon_service)) -> Cupon:
    return service.disable(cupon_id)


@router.patch("/{cupon_id}/habilitar", response_model=Cupon, dependencies=[Depends(require_admin)])
def enable_cupon(cupon_id: str, service: CuponService = Depends(get_cupon_service)) -> Cupon:
    return service.enable(cupon_id)
