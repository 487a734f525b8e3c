"""
TREE Uniformes - Orders API
Checkout, consulta y ciclo de vida de pedidos
"""
import logging
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from storefront.database import get_db
from storefront.models import Order, OrderItem, OrderStatus, Product, User
from storefront.schemas import OrderCreate, OrderStatusUpdate
from storefront.core import email_service
from storefront.core.numbering import generate_order_number, bump_number
from storefront.services.pricing import checkout_totals, line_total, quantize
from storefront.services.lifecycle import check_order_transition, InvalidTransition
from storefront.services.inventory import reserve_item, apply_status_change, InsufficientStock
from storefront.utils.document_pdf import generate_order_pdf
from storefront.api.auth import get_current_user, get_current_admin, get_optional_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Orders"])


async def unique_order_number(db: AsyncSession) -> str:
    """Folio UL-<año>-<ms>; si ya existe se toma el siguiente"""
    number = generate_order_number()
    while True:
        result = await db.execute(select(Order.id).where(Order.order_number == number))
        if result.first() is None:
            return number
        number = bump_number(number)


async def load_order(db: AsyncSession, order_id: int) -> Optional[Order]:
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_order_for(db: AsyncSession, order_id: int, user: User) -> Order:
    """Pedido visible para el usuario: admin o dueño"""
    order = await load_order(db, order_id)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Pedido no encontrado"
        )
    if not user.is_admin and order.customer_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No tienes acceso a este pedido"
        )
    return order


async def build_order_item(db: AsyncSession, line) -> OrderItem:
    """Partida con precio del catalogo; el precio del cliente solo se compara"""
    product = await db.get(Product, line.product_id)
    if not product or not product.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Producto {line.product_id} no disponible"
        )

    unit_price = quantize(product.price)
    if line.price is not None and quantize(line.price) != unit_price:
        logger.warning(
            f"Precio del cliente ignorado para producto {product.id}: "
            f"{quantize(line.price)} != {unit_price}"
        )

    return OrderItem(
        product_id=product.id,
        product_name=product.name,
        sku=product.sku,
        size=line.size,
        color=line.color,
        gender=line.gender,
        quantity=line.quantity,
        unit_price=unit_price,
        total_price=line_total(unit_price, line.quantity)
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(
    data: OrderCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user)
):
    """
    Crea el pedido y sus partidas en una sola transaccion.

    Acepta compras como invitado; con token valido el pedido queda ligado
    al cliente. Los correos se envian despues de responder.
    """
    items = [await build_order_item(db, line) for line in data.items]
    subtotal = sum((item.total_price for item in items), Decimal("0"))
    totals = checkout_totals(subtotal, data.shipping, data.tax)

    order = Order(
        order_number=await unique_order_number(db),
        customer_id=user.id if user else None,
        customer_email=data.customer_email or (user.email if user else None),
        customer_name=data.customer_name or (user.full_name if user else None),
        customer_phone=data.customer_phone or (user.phone if user else None),
        status=OrderStatus.PENDING.value,
        subtotal=totals.subtotal,
        shipping=totals.shipping,
        tax=totals.tax,
        total=totals.total,
        shipping_address=data.shipping_address.model_dump() if data.shipping_address else None,
        payment_method=data.payment_method,
        notes=data.notes,
        items=items
    )
    db.add(order)

    try:
        for item in items:
            await reserve_item(db, item)
    except InsufficientStock as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Stock insuficiente para {e.product_name} ({e.size or '-'} / {e.color or '-'}): disponible {e.available}"
        )

    try:
        await db.commit()
    except IntegrityError:
        # Folio tomado por otro pedido en el mismo milisegundo
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No se pudo asignar folio al pedido, intenta de nuevo"
        )

    order = await load_order(db, order.id)
    order_data = order.to_dict()
    logger.info(f"Pedido creado: {order.order_number} total {order_data['total']} ({len(items)} partidas)")

    background_tasks.add_task(email_service.notify_order_created, order_data)
    return order_data


@router.get("")
async def list_orders(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = 50,
    offset: int = 0,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Admin ve todos los pedidos; el cliente solo los suyos"""
    query = select(Order)
    count_query = select(func.count(Order.id))

    if not user.is_admin:
        query = query.where(Order.customer_id == user.id)
        count_query = count_query.where(Order.customer_id == user.id)
    if status_filter:
        query = query.where(Order.status == status_filter)
        count_query = count_query.where(Order.status == status_filter)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(Order.created_at.desc(), Order.id.desc()).offset(offset).limit(limit)
    )

    return {
        "orders": [o.to_dict() for o in result.scalars().all()],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


@router.get("/my")
async def my_orders(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Pedidos del cliente autenticado"""
    result = await db.execute(
        select(Order)
        .where(Order.customer_id == user.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    return [o.to_dict() for o in result.scalars().all()]


@router.get("/{order_id}")
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    order = await get_order_for(db, order_id, user)
    return order.to_dict()


@router.put("/{order_id}/status")
async def update_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    """Cambia el status validando la maquina de estados y mueve el inventario"""
    order = await load_order(db, order_id)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Pedido no encontrado"
        )

    previous = order.status
    try:
        changed = check_order_transition(previous, data.status)
    except InvalidTransition as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    if not changed:
        return order.to_dict()

    await apply_status_change(db, order, previous, data.status)
    order.status = data.status
    await db.commit()

    logger.info(f"Pedido {order.order_number}: {previous} -> {data.status} (por {admin.username or admin.email})")
    order = await load_order(db, order_id)
    return order.to_dict()


@router.get("/{order_id}/pdf")
async def get_order_pdf(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    order = await get_order_for(db, order_id, user)
    pdf_bytes = await generate_order_pdf(order.to_dict())
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="pedido-{order.order_number}.pdf"'}
    )
