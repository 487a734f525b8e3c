"""
TREE Uniformes - Order Schemas
"""
from decimal import Decimal
from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List

from storefront.models.order import OrderStatus

STATUS_PATTERN = "^(" + "|".join(s.value for s in OrderStatus) + ")$"


class ShippingAddress(BaseModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1, max_length=10)
    country: Optional[str] = "México"


class OrderItemRequest(BaseModel):
    """Partida tal como llega del carrito"""
    product_id: int
    size: Optional[str] = Field(None, max_length=20)
    color: Optional[str] = Field(None, max_length=50)
    gender: Optional[str] = Field(None, max_length=20)
    quantity: int = Field(..., ge=1)
    # Informativo: el precio se toma del catalogo
    price: Optional[Decimal] = Field(None, ge=0)


class OrderCreate(BaseModel):
    customer_name: Optional[str] = Field(None, max_length=255)
    customer_email: Optional[EmailStr] = None
    customer_phone: Optional[str] = Field(None, max_length=20)
    items: List[OrderItemRequest] = Field(..., min_length=1)
    shipping: Optional[Decimal] = Field(None, ge=0)
    tax: Optional[Decimal] = Field(None, ge=0)
    shipping_address: Optional[ShippingAddress] = None
    payment_method: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    status: str = Field(..., pattern=STATUS_PATTERN)


class CartLine(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)
    size: Optional[str] = None
    color: Optional[str] = None


class CartTotalsRequest(BaseModel):
    items: List[CartLine] = []
