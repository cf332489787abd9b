"""Schema behavior: wire aliases, catalog enum, totals."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from backoffice.models import (
    Cupon, CuponCreate, CuponUpdate, Order, OrderCreate, OrderStatus, OrderUpdate,
    ProductCreate, ProductoCatalogo,
    calculate_total, normalize_codigo,
)


def test_calculate_total_scenario():
    assert calculate_total(1500, 2, 10) == 2700


def test_calculate_total_rounds_to_cents():
    assert calculate_total(0.1, 3, 0) == 0.3


def test_normalize_codigo():
    assert normalize_codigo("  navidad2025 ") == "NAVIDAD2025"


def test_order_status_wire_values():
    assert [s.value for s in OrderStatus] == ["pendiente", "procesando", "enviado", "entregado", "cancelado"]


def test_catalog_has_twenty_products():
    assert len(ProductoCatalogo) == 20
    assert ProductoCatalogo('Monitor Samsung 27"') is ProductoCatalogo.MONITOR_SAMSUNG_27


def test_order_create_rejects_unknown_product():
    with pytest.raises(ValidationError):
        OrderCreate(
            producto="Commodore 64",
            descripcion="Retro",
            cantidad=1,
            precio=10,
            cliente="Ana",
            fechaEntrega=datetime(2030, 1, 1),
        )


def test_order_create_accepts_camel_and_snake_names():
    by_alias = OrderCreate.model_validate({
        "producto": "Mouse Gamer Razer", "descripcion": "x", "cantidad": 1, "precio": 5,
        "cliente": "Ana", "fechaEntrega": "2030-01-01T00:00:00",
    })
    by_name = OrderCreate(
        producto="Mouse Gamer Razer", descripcion="x", cantidad=1, precio=5,
        cliente="Ana", fecha_entrega=datetime(2030, 1, 1),
    )
    assert by_alias.fecha_entrega == by_name.fecha_entrega


def test_order_update_tracks_only_sent_fields():
    patch = OrderUpdate.model_validate({"cantidad": 4})
    assert patch.model_dump(exclude_unset=True) == {"cantidad": 4}


def test_cupon_dump_uses_camel_case_and_hides_created_at():
    cupon = Cupon(
        codigo="X", descuento=5, fecha_expiracion=datetime(2030, 1, 1),
        uso_maximo=2, created_at=datetime(2026, 1, 1),
    )
    dumped = cupon.model_dump(by_alias=True)
    assert "usoMaximo" in dumped
    assert "createdAt" not in dumped


def test_order_defaults_to_pending():
    order = Order(
        producto=ProductoCatalogo.CASE_GAMER_RGB, descripcion="x", cantidad=1, precio=1,
        total=1, cliente="Ana", fecha_entrega=datetime(2030, 1, 1),
    )
    assert order.estado is OrderStatus.PENDING


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_numeric_fields_must_be_finite(value):
    with pytest.raises(ValidationError):
        OrderUpdate(precio=value)
    with pytest.raises(ValidationError):
        CuponUpdate(descuento=value)
    with pytest.raises(ValidationError):
        ProductCreate(name="Mouse", price=value)


def test_cupon_code_is_stripped_before_length_check():
    with pytest.raises(ValidationError):
        CuponCreate(codigo="   ", descuento=10, fecha_expiracion=datetime(2030, 1, 1), uso_maximo=5)
    with pytest.raises(ValidationError):
        CuponUpdate(codigo=" ")

    assert CuponCreate(codigo=" promo ", descuento=10, fecha_expiracion=datetime(2030, 1, 1), uso_maximo=5).codigo == "promo"
