"""
TREE Uniformes - Catalog API
Categorias, marcas, tallas, colores, tipos de prenda y rangos de tallas
"""
import logging
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, update
from sqlalchemy.exc import IntegrityError

from storefront.database import get_db
from storefront.models import Category, Brand, Size, Color, GarmentType, SizeRange, Product, User
from storefront.schemas import (
    CategoryCreate,
    CategoryUpdate,
    BrandCreate,
    BrandUpdate,
    SizeCreate,
    ColorCreate,
    GarmentTypeCreate,
    SizeRangeCreate
)
from storefront.api.auth import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Catalog"])

# Tallas por tipo cuando no hay rango configurado
STANDARD_SIZES = ["XS", "S", "M", "L", "XL", "2XL", "3XL"]
DEFAULT_SIZES = ["S", "M", "L", "XL"]


def default_sizes(size_type: Optional[str]) -> List[str]:
    if size_type == "standard":
        return list(STANDARD_SIZES)
    if size_type == "waist":
        return [str(n) for n in range(28, 45, 2)]
    if size_type == "clothing":
        return [str(n) for n in range(5, 22, 2)]
    return list(DEFAULT_SIZES)


def sizes_for_range(size_range: Optional[SizeRange]) -> List[str]:
    """Lista explicita, luego rango numerico, luego defaults del tipo"""
    if size_range is None:
        return list(DEFAULT_SIZES)
    if size_range.size_list:
        return list(size_range.size_list)
    if size_range.min_size is not None and size_range.max_size is not None:
        step = 2 if size_range.size_type in ("waist", "clothing") else 1
        return [str(n) for n in range(size_range.min_size, size_range.max_size + 1, step)]
    return default_sizes(size_range.size_type)


async def _get_or_404(db: AsyncSession, model, item_id: int, label: str):
    item = await db.get(model, item_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{label} no encontrada"
        )
    return item


async def _commit_unique(db: AsyncSession, detail: str):
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


# ============================================
# CATEGORIAS
# ============================================

@router.get("/categories")
async def list_categories(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Category).order_by(Category.name))
    return [c.to_dict() for c in result.scalars().all()]


@router.post("/categories", status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    category = Category(**data.model_dump())
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category.to_dict()


@router.put("/categories/{category_id}")
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    category = await _get_or_404(db, Category, category_id, "Categoria")
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(category, field, value)
    await db.commit()
    await db.refresh(category)
    return category.to_dict()


@router.delete("/categories/{category_id}")
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    category = await _get_or_404(db, Category, category_id, "Categoria")
    # Los productos de la categoria quedan sin categoria
    await db.execute(
        update(Product).where(Product.category_id == category_id).values(category_id=None)
    )
    await db.delete(category)
    await db.commit()
    return {"message": "Categoria eliminada"}


# ============================================
# MARCAS
# ============================================

@router.get("/brands")
async def list_brands(active_only: bool = False, db: AsyncSession = Depends(get_db)):
    query = select(Brand)
    if active_only:
        query = query.where(Brand.is_active == True)
    result = await db.execute(query.order_by(Brand.name))
    return [b.to_dict() for b in result.scalars().all()]


@router.get("/brands/{brand_id}")
async def get_brand(brand_id: int, db: AsyncSession = Depends(get_db)):
    brand = await _get_or_404(db, Brand, brand_id, "Marca")
    return brand.to_dict()


@router.post("/brands", status_code=status.HTTP_201_CREATED)
async def create_brand(
    data: BrandCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    result = await db.execute(
        select(Brand).where(func.lower(Brand.name) == data.name.strip().lower())
    )
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Ya existe una marca con ese nombre"
        )

    brand = Brand(**data.model_dump())
    brand.name = brand.name.strip()
    db.add(brand)
    await _commit_unique(db, "Ya existe una marca con ese nombre")
    await db.refresh(brand)
    return brand.to_dict()


@router.put("/brands/{brand_id}")
async def update_brand(
    brand_id: int,
    data: BrandUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    brand = await _get_or_404(db, Brand, brand_id, "Marca")
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(brand, field, value)
    await _commit_unique(db, "Ya existe una marca con ese nombre")
    await db.refresh(brand)
    return brand.to_dict()


@router.delete("/brands/{brand_id}")
async def delete_brand(
    brand_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    brand = await _get_or_404(db, Brand, brand_id, "Marca")
    await db.delete(brand)
    await db.commit()
    return {"message": "Marca eliminada"}


# ============================================
# TALLAS Y COLORES
# ============================================

@router.get("/sizes")
async def list_sizes(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Size).order_by(Size.sort_order, Size.name))
    return [s.to_dict() for s in result.scalars().all()]


@router.post("/sizes", status_code=status.HTTP_201_CREATED)
async def create_size(
    data: SizeCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    size = Size(**data.model_dump())
    db.add(size)
    await _commit_unique(db, "La talla ya existe")
    await db.refresh(size)
    return size.to_dict()


@router.get("/colors")
async def list_colors(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Color).order_by(Color.name))
    return [c.to_dict() for c in result.scalars().all()]


@router.post("/colors", status_code=status.HTTP_201_CREATED)
async def create_color(
    data: ColorCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    color = Color(**data.model_dump())
    db.add(color)
    await _commit_unique(db, "El color ya existe")
    await db.refresh(color)
    return color.to_dict()


# ============================================
# TIPOS DE PRENDA Y RANGOS DE TALLAS
# ============================================

@router.get("/garment-types")
async def list_garment_types(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(GarmentType).where(GarmentType.is_active == True).order_by(GarmentType.display_name)
    )
    return [g.to_dict() for g in result.scalars().all()]


@router.post("/garment-types", status_code=status.HTTP_201_CREATED)
async def create_garment_type(
    data: GarmentTypeCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    garment_type = GarmentType(**data.model_dump())
    db.add(garment_type)
    await _commit_unique(db, "El tipo de prenda ya existe")
    await db.refresh(garment_type)
    return garment_type.to_dict()


@router.get("/size-ranges")
async def list_size_ranges(
    garment_type_id: Optional[int] = None,
    gender: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    query = select(SizeRange).where(SizeRange.is_active == True)
    if garment_type_id is not None:
        query = query.where(SizeRange.garment_type_id == garment_type_id)
    if gender:
        query = query.where(SizeRange.gender == gender)
    result = await db.execute(query.order_by(SizeRange.id))
    return [r.to_dict() for r in result.scalars().all()]


@router.get("/size-ranges/available-sizes")
async def available_sizes(
    garment_type_id: int,
    gender: str,
    db: AsyncSession = Depends(get_db)
):
    """Tallas ofrecidas para un tipo de prenda y genero"""
    result = await db.execute(
        select(SizeRange).where(
            SizeRange.garment_type_id == garment_type_id,
            SizeRange.gender == gender,
            SizeRange.is_active == True
        ).limit(1)
    )
    size_range = result.scalar_one_or_none()
    return {
        "garment_type_id": garment_type_id,
        "gender": gender,
        "size_type": size_range.size_type if size_range else None,
        "sizes": sizes_for_range(size_range),
    }


@router.post("/size-ranges", status_code=status.HTTP_201_CREATED)
async def create_size_range(
    data: SizeRangeCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    if data.min_size is not None and data.max_size is not None and data.min_size > data.max_size:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="La talla minima no puede ser mayor que la maxima"
        )
    size_range = SizeRange(**data.model_dump())
    size_range.size_list = data.size_list or []
    db.add(size_range)
    await db.commit()
    await db.refresh(size_range)
    return size_range.to_dict()
