"""
TREE Uniformes - Inventory API
Existencias por variante (producto, talla, color)
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from storefront.database import get_db
from storefront.models import Inventory, OrderItem, Product, User
from storefront.schemas import InventoryCreate, InventoryUpdate
from storefront.core import settings
from storefront.services.inventory import find_variant
from storefront.api.auth import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inventory", tags=["Inventory"])


async def _load(db: AsyncSession, inventory_id: int) -> Optional[Inventory]:
    result = await db.execute(
        select(Inventory)
        .options(selectinload(Inventory.product))
        .where(Inventory.id == inventory_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _get_or_404(db: AsyncSession, inventory_id: int) -> Inventory:
    row = await _load(db, inventory_id)
    if not row:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Registro de inventario no encontrado"
        )
    return row


@router.get("")
async def list_inventory(
    product_id: Optional[int] = None,
    low_stock: bool = False,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    """Lista existencias; low_stock deja solo variantes sin stock o bajo stock"""
    query = select(Inventory).options(selectinload(Inventory.product))
    if product_id is not None:
        query = query.where(Inventory.product_id == product_id)
    if low_stock:
        query = query.where(
            Inventory.quantity - Inventory.reserved_quantity <= settings.LOW_STOCK_THRESHOLD
        )

    result = await db.execute(query.order_by(Inventory.product_id, Inventory.size, Inventory.color))
    return [row.to_dict() for row in result.scalars().all()]


@router.get("/{inventory_id}")
async def get_inventory(
    inventory_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    row = await _get_or_404(db, inventory_id)
    return row.to_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_inventory(
    data: InventoryCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    """Registra la existencia de una variante nueva"""
    if not await db.get(Product, data.product_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Producto no encontrado"
        )

    if await find_variant(db, data.product_id, data.size, data.color):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ya existe inventario para esa talla y color"
        )

    row = Inventory(**data.model_dump(), reserved_quantity=0)
    db.add(row)
    await db.commit()

    logger.info(f"Inventario creado: producto {row.product_id} {row.size}/{row.color} = {row.quantity}")
    row = await _load(db, row.id)
    return row.to_dict()


@router.put("/{inventory_id}")
async def update_inventory(
    inventory_id: int,
    data: InventoryUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    row = await _get_or_404(db, inventory_id)
    update_data = data.model_dump(exclude_unset=True)

    quantity = update_data.get("quantity", row.quantity) or 0
    reserved = update_data.get("reserved_quantity", row.reserved_quantity) or 0
    if reserved > quantity:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Lo apartado ({reserved}) no puede superar la existencia ({quantity})"
        )

    for field, value in update_data.items():
        setattr(row, field, value)

    await db.commit()
    row = await _load(db, inventory_id)
    return row.to_dict()


@router.delete("/{inventory_id}")
async def delete_inventory(
    inventory_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    row = await _get_or_404(db, inventory_id)
    await db.execute(
        update(OrderItem).where(OrderItem.inventory_id == inventory_id).values(inventory_id=None)
    )
    await db.delete(row)
    await db.commit()
    return {"message": "Inventario eliminado"}
