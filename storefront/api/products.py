"""
TREE Uniformes - Products API
Catalogo de productos, imagenes por color, merchandising e inventario por producto
"""
import logging
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, or_
from sqlalchemy.exc import IntegrityError

from storefront.database import get_db
from storefront.models import (
    Product,
    ProductColorImage,
    Brand,
    Color,
    Inventory,
    OrderItem,
    QuoteItem,
    User
)
from storefront.schemas import (
    ProductCreate,
    ProductUpdate,
    ProductOrderUpdate,
    ProductColorImageCreate,
    ProductColorImageUpdate,
    InventoryUpsert
)
from storefront.schemas.catalog import VALID_GENDERS
from storefront.core.numbering import generate_sku
from storefront.services.inventory import find_variant
from storefront.api.auth import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

DUPLICATE_SKU_DETAIL = "El SKU ya existe en el sistema"


def duplicate_sku_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": DUPLICATE_SKU_DETAIL, "error": "duplicate_sku"}
    )


def _check_genders(genders: Optional[List[str]]):
    invalid = [g for g in genders or [] if g not in VALID_GENDERS]
    if invalid:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Genero invalido: {', '.join(invalid)}"
        )


async def _sku_taken(db: AsyncSession, sku: str, exclude_id: Optional[int] = None) -> bool:
    query = select(Product.id).where(Product.sku == sku)
    if exclude_id is not None:
        query = query.where(Product.id != exclude_id)
    result = await db.execute(query)
    return result.first() is not None


async def get_product_or_404(db: AsyncSession, product_id: int) -> Product:
    product = await db.get(Product, product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Producto no encontrado"
        )
    return product


async def _reload(db: AsyncSession, product_id: int) -> Product:
    result = await db.execute(
        select(Product)
        .where(Product.id == product_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


@router.get("")
async def list_products(
    category_id: Optional[int] = None,
    brand_id: Optional[int] = None,
    brand: Optional[str] = None,
    gender: Optional[str] = None,
    garment_type_id: Optional[int] = None,
    is_active: Optional[bool] = None,
    is_featured: Optional[bool] = None,
    search: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
    db: AsyncSession = Depends(get_db)
):
    """
    Lista productos con filtros.

    brand_id se traduce al nombre de la marca; gender busca en la lista
    genders del producto (o en gender si la lista esta vacia).
    """
    query = select(Product)

    if category_id is not None:
        query = query.where(Product.category_id == category_id)
    if brand_id is not None:
        brand_row = await db.get(Brand, brand_id)
        if not brand_row:
            return []
        query = query.where(Product.brand == brand_row.name)
    elif brand:
        query = query.where(Product.brand == brand)
    if garment_type_id is not None:
        query = query.where(Product.garment_type_id == garment_type_id)
    if is_active is not None:
        query = query.where(Product.is_active == is_active)
    if is_featured is not None:
        query = query.where(Product.is_featured == is_featured)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            Product.name.ilike(pattern),
            Product.sku.ilike(pattern),
            Product.description.ilike(pattern)
        ))

    query = query.order_by(Product.display_order, Product.created_at.desc(), Product.id.desc())

    if gender:
        # genders es JSON: se filtra en memoria para no depender del dialecto
        result = await db.execute(query)
        products = [
            p for p in result.scalars().all()
            if gender in (p.genders or []) or (not p.genders and p.gender == gender)
        ]
        products = products[offset:offset + limit]
    else:
        result = await db.execute(query.offset(offset).limit(limit))
        products = result.scalars().all()

    return [p.to_dict() for p in products]


@router.put("/batch-order")
async def update_products_order(
    updates: List[ProductOrderUpdate],
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    """Guarda el orden de merchandising (display_order / is_featured)"""
    updated = []
    for item in updates:
        product = await get_product_or_404(db, item.id)
        product.display_order = item.display_order
        if item.is_featured is not None:
            product.is_featured = item.is_featured
        updated.append(product)

    await db.commit()
    logger.info(f"Orden de {len(updated)} productos actualizado")
    return [p.to_dict(include_color_images=False) for p in updated]


@router.get("/{product_id}")
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await get_product_or_404(db, product_id)
    return product.to_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    """Crea producto; sin SKU se genera uno automatico"""
    _check_genders(data.genders)

    values = data.model_dump()
    sku = (values.pop("sku") or "").strip() or generate_sku()
    if await _sku_taken(db, sku):
        return duplicate_sku_response()

    if not values["genders"] and values.get("gender"):
        values["genders"] = [values["gender"]]

    product = Product(sku=sku, **values)
    db.add(product)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        return duplicate_sku_response()

    product = await _reload(db, product.id)
    logger.info(f"Producto creado: {product.sku} - {product.name}")
    return product.to_dict()


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    data: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    product = await get_product_or_404(db, product_id)
    update_data = data.model_dump(exclude_unset=True)
    _check_genders(update_data.get("genders"))

    if update_data.get("sku") and update_data["sku"] != product.sku:
        if await _sku_taken(db, update_data["sku"], exclude_id=product_id):
            return duplicate_sku_response()

    for field, value in update_data.items():
        setattr(product, field, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        return duplicate_sku_response()

    product = await _reload(db, product_id)
    return product.to_dict()


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    product = await get_product_or_404(db, product_id)

    # Las partidas historicas conservan nombre y SKU desnormalizados
    inventory_ids = select(Inventory.id).where(Inventory.product_id == product_id)
    await db.execute(
        update(OrderItem).where(OrderItem.inventory_id.in_(inventory_ids)).values(inventory_id=None)
    )
    await db.execute(
        update(OrderItem).where(OrderItem.product_id == product_id).values(product_id=None)
    )
    await db.execute(
        update(QuoteItem).where(QuoteItem.product_id == product_id).values(product_id=None)
    )
    await db.execute(delete(Inventory).where(Inventory.product_id == product_id))

    await db.delete(product)
    await db.commit()
    logger.info(f"Producto eliminado: {product.sku}")
    return {"message": "Producto eliminado"}


# ============================================
# IMAGENES POR COLOR
# ============================================

@router.get("/{product_id}/color-images")
async def list_color_images(product_id: int, db: AsyncSession = Depends(get_db)):
    await get_product_or_404(db, product_id)
    result = await db.execute(
        select(ProductColorImage)
        .where(ProductColorImage.product_id == product_id)
        .order_by(ProductColorImage.sort_order, ProductColorImage.id)
    )
    return [ci.to_dict() for ci in result.scalars().all()]


async def _clear_primary(db: AsyncSession, product_id: int, keep_id: Optional[int] = None):
    """Solo una imagen de color puede ser la principal"""
    result = await db.execute(
        select(ProductColorImage).where(
            ProductColorImage.product_id == product_id,
            ProductColorImage.is_primary == True
        )
    )
    for ci in result.scalars().all():
        if ci.id != keep_id:
            ci.is_primary = False


async def _get_color_or_400(db: AsyncSession, color_id: int) -> Color:
    color = await db.get(Color, color_id)
    if not color:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Color no encontrado"
        )
    return color


@router.post("/{product_id}/color-images", status_code=status.HTTP_201_CREATED)
async def create_color_image(
    product_id: int,
    data: ProductColorImageCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    await get_product_or_404(db, product_id)
    color = await _get_color_or_400(db, data.color_id)

    if data.is_primary:
        await _clear_primary(db, product_id)

    color_image = ProductColorImage(product_id=product_id, **data.model_dump())
    color_image.color = color
    db.add(color_image)
    await db.commit()
    return color_image.to_dict()


async def _get_color_image_or_404(db: AsyncSession, product_id: int, image_id: int) -> ProductColorImage:
    color_image = await db.get(ProductColorImage, image_id)
    if not color_image or color_image.product_id != product_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Imagen de color no encontrada"
        )
    return color_image


@router.put("/{product_id}/color-images/{image_id}")
async def update_color_image(
    product_id: int,
    image_id: int,
    data: ProductColorImageUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    color_image = await _get_color_image_or_404(db, product_id, image_id)
    update_data = data.model_dump(exclude_unset=True)

    if "color_id" in update_data:
        color_image.color = await _get_color_or_400(db, update_data["color_id"])
    if update_data.get("is_primary"):
        await _clear_primary(db, product_id, keep_id=image_id)

    for field, value in update_data.items():
        setattr(color_image, field, value)

    await db.commit()
    return color_image.to_dict()


@router.delete("/{product_id}/color-images/{image_id}")
async def delete_color_image(
    product_id: int,
    image_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    color_image = await _get_color_image_or_404(db, product_id, image_id)
    await db.delete(color_image)
    await db.commit()
    return {"message": "Imagen eliminada"}


# ============================================
# INVENTARIO DEL PRODUCTO
# ============================================

@router.get("/{product_id}/inventory")
async def get_product_inventory(product_id: int, db: AsyncSession = Depends(get_db)):
    """Existencias por variante (publico, para mostrar disponibilidad)"""
    await get_product_or_404(db, product_id)
    result = await db.execute(
        select(Inventory)
        .where(Inventory.product_id == product_id)
        .order_by(Inventory.size, Inventory.color)
    )
    return [row.to_dict() for row in result.scalars().all()]


@router.put("/{product_id}/inventory")
async def upsert_product_inventory(
    product_id: int,
    data: InventoryUpsert,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    """Crea o actualiza la existencia de la variante (talla, color)"""
    await get_product_or_404(db, product_id)

    row = await find_variant(db, product_id, data.size, data.color, lock=True)
    if row is None:
        row = Inventory(
            product_id=product_id,
            size=data.size,
            color=data.color,
            quantity=data.quantity,
            reserved_quantity=0
        )
        db.add(row)
    else:
        if (row.reserved_quantity or 0) > data.quantity:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"La existencia no puede ser menor a lo apartado ({row.reserved_quantity})"
            )
        row.quantity = data.quantity

    await db.commit()
    await db.refresh(row)
    return row.to_dict()
