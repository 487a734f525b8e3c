"""
TREE Uniformes - Inventory Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional


class InventoryCreate(BaseModel):
    product_id: int
    size: Optional[str] = Field(None, max_length=20)
    color: Optional[str] = Field(None, max_length=50)
    quantity: int = Field(0, ge=0)


class InventoryUpdate(BaseModel):
    quantity: Optional[int] = Field(None, ge=0)
    reserved_quantity: Optional[int] = Field(None, ge=0)


class InventoryUpsert(BaseModel):
    """PUT /products/{id}/inventory: crea o actualiza la variante"""
    size: Optional[str] = Field(None, max_length=20)
    color: Optional[str] = Field(None, max_length=50)
    quantity: int = Field(..., ge=0)
