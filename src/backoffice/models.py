# Backoffice/src/backoffice/models.py
# @ai-rules:
# 1. [Pattern]: Each entity follows a Create/Update/Read split -- XCreate for POST, XUpdate for PUT (partial), X for responses.
# 2. [Constraint]: XUpdate fields must ALL be Optional so callers can use model_dump(exclude_unset=True).
# 3. [Wire format]: Attributes are snake_case, JSON keys are camelCase (alias_generator). FastAPI serializes by alias.
# 4. [Gotcha]: Order/Cupon numeric bounds live in the services, not here, so they answer 400 with a domain message.
# 5. [Constraint]: Floats must be finite (allow_inf_nan=False); NaN would slip past every bound comparison.
"""Pydantic schemas for products, orders and coupons."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel


class OrderStatus(str, Enum):
    PENDING = "pendiente"
    PROCESSING = "procesando"
    SHIPPED = "enviado"
    DELIVERED = "entregado"
    CANCELLED = "cancelado"


# Statuses from which an order can no longer be cancelled
NON_CANCELLABLE_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


class ProductoCatalogo(str, Enum):
    """Closed catalog of product names an order may reference."""
    LAPTOP_HP_PAVILION = "Laptop HP Pavilion"
    LAPTOP_DELL_XPS = "Laptop Dell XPS"
    LAPTOP_LENOVO_THINKPAD = "Laptop Lenovo ThinkPad"
    LAPTOP_ASUS_ROG = "Laptop ASUS ROG"
    MONITOR_SAMSUNG_27 = 'Monitor Samsung 27"'
    MONITOR_LG_ULTRAWIDE = "Monitor LG UltraWide"
    TECLADO_LOGITECH = "Teclado Mecánico Logitech"
    MOUSE_RAZER = "Mouse Gamer Razer"
    GPU_NVIDIA_RTX_4090 = "Tarjeta Gráfica NVIDIA RTX 4090"
    GPU_AMD_RX_7900 = "Tarjeta Gráfica AMD Radeon RX 7900"
    CPU_INTEL_I9 = "Procesador Intel Core i9"
    CPU_AMD_RYZEN_9 = "Procesador AMD Ryzen 9"
    RAM_CORSAIR_32GB = "RAM Corsair 32GB DDR5"
    SSD_SAMSUNG_1TB = "SSD Samsung 1TB NVMe"
    MOTHERBOARD_ASUS_ROG = "Motherboard ASUS ROG"
    FUENTE_850W = "Fuente de Poder 850W"
    CASE_GAMER_RGB = "Case Gamer RGB"
    WEBCAM_LOGITECH = "Webcam Logitech HD"
    AURICULARES_HYPERX = "Auriculares HyperX Cloud"
    IMPRESORA_HP = "Impresora HP LaserJet"


class StoreModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python. NaN and Infinity are rejected."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


# Length is checked after stripping, so a blank code never reaches normalize_codigo
Codigo = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]


def calculate_total(precio: float, cantidad: int, descuento: float) -> float:
    """Order total after a percentage discount, rounded to cents."""
    subtotal = precio * cantidad
    return round(subtotal - subtotal * (descuento / 100), 2)


def normalize_codigo(codigo: str) -> str:
    return codigo.strip().upper()


# --- Products ---------------------------------------------------------------

class Product(StoreModel):
    """Product schema for the store catalog."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    description: Optional[str] = Field(default="")
    price: float = Field(ge=0)
    stock: int = Field(ge=0, default=0)
    category: Optional[str] = None
    marca: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, exclude=True)


class ProductCreate(StoreModel):
    """Schema for creating a new product."""
    name: str = Field(min_length=1)
    description: Optional[str] = Field(default="")
    price: float = Field(ge=0)
    stock: int = Field(ge=0, default=0)
    category: Optional[str] = None
    marca: Optional[str] = None
    image_url: Optional[str] = None


class ProductUpdate(StoreModel):
    """Schema for partial product updates. Only provided fields are applied."""
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0)
    category: Optional[str] = None
    marca: Optional[str] = None
    image_url: Optional[str] = None


# --- Orders -----------------------------------------------------------------

class Order(StoreModel):
    """Schema for an order in responses."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    producto: ProductoCatalogo
    descripcion: str
    cantidad: int
    precio: float
    descuento: float = 0.0
    total: float
    cliente: str
    estado: OrderStatus = OrderStatus.PENDING
    fecha_entrega: datetime
    created_at: Optional[datetime] = Field(default=None, exclude=True)


class OrderCreate(StoreModel):
    """Schema for creating a new order."""
    producto: ProductoCatalogo
    descripcion: str
    cantidad: int
    precio: float
    descuento: Optional[float] = None
    cliente: str = Field(min_length=1)
    estado: Optional[OrderStatus] = None
    fecha_entrega: datetime


class OrderUpdate(StoreModel):
    """Schema for order updates. Omitted fields keep their stored value."""
    producto: Optional[ProductoCatalogo] = None
    descripcion: Optional[str] = None
    cantidad: Optional[int] = None
    precio: Optional[float] = None
    descuento: Optional[float] = None
    cliente: Optional[str] = Field(default=None, min_length=1)
    estado: Optional[OrderStatus] = None
    fecha_entrega: Optional[datetime] = None


# --- Coupons ----------------------------------------------------------------

class Cupon(StoreModel):
    """Coupon schema for responses."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    codigo: str
    descuento: float
    fecha_expiracion: datetime
    activo: bool = True
    uso_maximo: int
    uso_actual: int = 0
    created_at: Optional[datetime] = Field(default=None, exclude=True)


class CuponCreate(StoreModel):
    """Schema for creating a new coupon."""
    codigo: Codigo
    descuento: float
    fecha_expiracion: datetime
    activo: Optional[bool] = None
    uso_maximo: int


class CuponUpdate(StoreModel):
    """Schema for partial coupon updates."""
    codigo: Optional[Codigo] = None
    descuento: Optional[float] = None
    fecha_expiracion: Optional[datetime] = None
    activo: Optional[bool] = None
    uso_maximo: Optional[int] = None
    uso_actual: Optional[int] = None
