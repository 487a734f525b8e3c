"""
TREE Uniformes - Catalog Schemas
"""
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional, List

from storefront.models.catalog import Gender

GENDER_PATTERN = r'^(masculino|femenino|unisex)$'


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None


class BrandCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    logo: Optional[str] = None
    is_active: bool = True


class BrandUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    logo: Optional[str] = None
    is_active: Optional[bool] = None


class SizeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=20)
    sort_order: int = 0


class ColorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    hex_code: Optional[str] = Field(None, pattern=r'^#[0-9A-Fa-f]{6}$')


class GarmentTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    display_name: str = Field(..., min_length=1, max_length=100)
    is_active: bool = True


class SizeRangeCreate(BaseModel):
    garment_type_id: Optional[int] = None
    gender: str = Field(..., pattern=GENDER_PATTERN)
    size_type: str = Field(..., min_length=1, max_length=50)
    min_size: Optional[int] = None
    max_size: Optional[int] = None
    size_list: Optional[List[str]] = None
    is_active: bool = True


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    sku: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    category_id: Optional[int] = None
    brand: Optional[str] = Field(None, max_length=100)
    gender: Optional[str] = Field(None, pattern=GENDER_PATTERN)
    genders: List[str] = []
    garment_type_id: Optional[int] = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    images: List[str] = []
    sizes: List[str] = []
    colors: List[str] = []
    is_active: bool = True
    is_featured: bool = False
    display_order: int = 0


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    sku: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = None
    category_id: Optional[int] = None
    brand: Optional[str] = Field(None, max_length=100)
    gender: Optional[str] = Field(None, pattern=GENDER_PATTERN)
    genders: Optional[List[str]] = None
    garment_type_id: Optional[int] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    images: Optional[List[str]] = None
    sizes: Optional[List[str]] = None
    colors: Optional[List[str]] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    display_order: Optional[int] = None


class ProductOrderUpdate(BaseModel):
    """Orden de merchandising (arrastrar y soltar)"""
    id: int
    display_order: int
    is_featured: Optional[bool] = None


class ProductColorImageCreate(BaseModel):
    color_id: int
    images: List[str] = []
    is_primary: bool = False
    sort_order: int = 0


class ProductColorImageUpdate(BaseModel):
    color_id: Optional[int] = None
    images: Optional[List[str]] = None
    is_primary: Optional[bool] = None
    sort_order: Optional[int] = None


VALID_GENDERS = {g.value for g in Gender}
