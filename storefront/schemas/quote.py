"""
TREE Uniformes - Quote Schemas
"""
from datetime import datetime, timezone
from decimal import Decimal
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List

from storefront.models.quote import QuoteStatus

STATUS_PATTERN = "^(" + "|".join(s.value for s in QuoteStatus) + ")$"
URGENCY_PATTERN = r'^(normal|urgent|very_urgent)$'


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Fechas con zona horaria se guardan como UTC sin tzinfo"""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class QuoteItemCreate(BaseModel):
    """Partida capturada por el admin (precio explicito)"""
    product_id: Optional[int] = None
    product_name: Optional[str] = Field(None, max_length=200)
    sku: Optional[str] = Field(None, max_length=50)
    size: Optional[str] = Field(None, max_length=20)
    color: Optional[str] = Field(None, max_length=50)
    quantity: int = Field(..., ge=1)
    unit_price: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class QuoteCreate(BaseModel):
    customer_id: Optional[str] = None
    customer_name: Optional[str] = Field(None, max_length=255)
    customer_email: Optional[EmailStr] = None
    customer_company: Optional[str] = Field(None, max_length=200)
    items: List[QuoteItemCreate] = Field(..., min_length=1)
    tax: Optional[Decimal] = Field(None, ge=0)
    valid_until: Optional[datetime] = None
    urgency: str = Field("normal", pattern=URGENCY_PATTERN)
    notes: Optional[str] = None
    status: str = Field(QuoteStatus.DRAFT.value, pattern=r'^(draft|sent)$')

    @field_validator("valid_until")
    @classmethod
    def check_valid_until(cls, v):
        return naive_utc(v)


class QuoteUpdate(BaseModel):
    status: Optional[str] = Field(None, pattern=STATUS_PATTERN)
    notes: Optional[str] = None
    valid_until: Optional[datetime] = None
    tax: Optional[Decimal] = Field(None, ge=0)

    @field_validator("valid_until")
    @classmethod
    def check_valid_until(cls, v):
        return naive_utc(v)


class QuoteRequestProduct(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)
    size: str = ""
    color: str = ""
    notes: Optional[str] = None


class CustomerInfo(BaseModel):
    """Datos de contacto cuando quien cotiza no tiene sesion"""
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None


class QuoteRequest(BaseModel):
    """Solicitud de presupuesto desde la tienda"""
    products: List[QuoteRequestProduct] = Field(..., min_length=1)
    urgency: str = Field("normal", pattern=URGENCY_PATTERN)
    notes: Optional[str] = None
    preferred_delivery_date: Optional[datetime] = None
    customer_info: Optional[CustomerInfo] = None

    @field_validator("preferred_delivery_date")
    @classmethod
    def check_delivery_date(cls, v):
        return naive_utc(v)
