"""
TREE Uniformes - Dashboard API
Indicadores para el panel de administracion
"""
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from storefront.database import get_db
from storefront.models import (
    Order,
    OrderItem,
    OrderStatus,
    Product,
    User,
    UserRole,
    Inventory,
    Quote,
    ContactMessage
)
from storefront.core import settings
from storefront.services.pricing import format_money
from storefront.api.auth import get_current_admin

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats")
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    """Estadisticas para el dashboard admin"""
    today = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)

    # Ventas de hoy (pedidos entregados)
    result = await db.execute(
        select(func.coalesce(func.sum(Order.total), 0)).where(
            Order.created_at >= today,
            Order.status == OrderStatus.DELIVERED.value
        )
    )
    total_sales = result.scalar() or Decimal("0")

    result = await db.execute(
        select(func.count(Order.id)).where(Order.status == OrderStatus.PENDING.value)
    )
    new_orders = result.scalar() or 0

    result = await db.execute(
        select(func.count(Product.id)).where(Product.is_active == True)
    )
    active_products = result.scalar() or 0

    result = await db.execute(
        select(func.count(User.id)).where(User.role == UserRole.CUSTOMER.value)
    )
    total_customers = result.scalar() or 0

    result = await db.execute(
        select(func.count(ContactMessage.id)).where(ContactMessage.is_read == False)
    )
    unread_messages = result.scalar() or 0

    # Variantes en bajo stock o sin stock
    result = await db.execute(
        select(func.count(Inventory.id)).where(
            Inventory.quantity - Inventory.reserved_quantity <= settings.LOW_STOCK_THRESHOLD
        )
    )
    low_stock = result.scalar() or 0

    result = await db.execute(
        select(Quote.status, func.count(Quote.id)).group_by(Quote.status)
    )
    quotes_by_status = {row[0]: row[1] for row in result.all()}

    return {
        "total_sales": format_money(total_sales),
        "new_orders": new_orders,
        "active_products": active_products,
        "total_customers": total_customers,
        "unread_messages": unread_messages,
        "low_stock_variants": low_stock,
        "quotes_by_status": quotes_by_status,
        "generated_at": datetime.utcnow().isoformat()
    }


@router.get("/top-products")
async def get_top_products(limit: int = 5, db: AsyncSession = Depends(get_db)):
    """Productos mas vendidos por piezas"""
    sales_count = func.coalesce(func.sum(OrderItem.quantity), 0)
    result = await db.execute(
        select(
            Product,
            sales_count.label("sales_count"),
            func.coalesce(func.sum(OrderItem.total_price), 0).label("revenue")
        )
        .outerjoin(OrderItem, OrderItem.product_id == Product.id)
        .group_by(Product.id)
        .order_by(sales_count.desc(), Product.id)
        .limit(limit)
    )

    return [
        {
            **product.to_dict(include_color_images=False),
            "sales_count": int(count),
            "revenue": format_money(revenue),
        }
        for product, count, revenue in result.all()
    ]


@router.get("/recent-orders")
async def get_recent_orders(
    limit: int = 10,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    result = await db.execute(
        select(Order).order_by(Order.created_at.desc(), Order.id.desc()).limit(limit)
    )
    return [o.to_dict(include_items=False) for o in result.scalars().all()]
