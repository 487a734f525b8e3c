"""
TREE Uniformes - Inventory Service
Apartado, liberacion y consumo de existencias por pedido
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import settings
from storefront.models import Inventory, Order, OrderItem, OrderStatus

logger = logging.getLogger(__name__)


class InsufficientStock(Exception):
    """No hay existencia disponible para apartar la partida"""

    def __init__(self, product_name: str, size: Optional[str], color: Optional[str], requested: int, available: int):
        self.product_name = product_name
        self.size = size
        self.color = color
        self.requested = requested
        self.available = available
        super().__init__(
            f"Stock insuficiente para {product_name} ({size or '-'} / {color or '-'}): "
            f"solicitado {requested}, disponible {available}"
        )


async def find_variant(
    db: AsyncSession,
    product_id: int,
    size: Optional[str],
    color: Optional[str],
    lock: bool = False
) -> Optional[Inventory]:
    """Busca la fila de inventario de la variante (producto, talla, color)"""
    query = select(Inventory).where(
        Inventory.product_id == product_id,
        Inventory.size == size if size is not None else Inventory.size.is_(None),
        Inventory.color == color if color is not None else Inventory.color.is_(None),
    ).order_by(Inventory.id).limit(1)
    if lock:
        query = query.with_for_update()
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def reserve_item(db: AsyncSession, item: OrderItem) -> Optional[Inventory]:
    """
    Aparta la cantidad de la partida en su variante.

    Las variantes sin fila de inventario no se controlan y no bloquean la venta.
    Lanza InsufficientStock si lo disponible no alcanza.
    """
    if not settings.INVENTORY_RESERVATION_ENABLED or item.product_id is None:
        return None

    row = await find_variant(db, item.product_id, item.size, item.color, lock=True)
    if row is None:
        return None

    if row.available < item.quantity:
        raise InsufficientStock(item.product_name, item.size, item.color, item.quantity, row.available)

    row.reserved_quantity = (row.reserved_quantity or 0) + item.quantity
    item.inventory_id = row.id
    return row


async def _reserved_rows(db: AsyncSession, order: Order):
    for item in order.items:
        if item.inventory_id is None:
            continue
        row = await db.get(Inventory, item.inventory_id, with_for_update=True)
        if row is None:
            logger.warning(f"Inventario {item.inventory_id} del pedido {order.order_number} ya no existe")
            continue
        yield item, row


async def release_order(db: AsyncSession, order: Order):
    """Devuelve lo apartado (pedido cancelado antes de enviarse)"""
    async for item, row in _reserved_rows(db, order):
        row.reserved_quantity = max((row.reserved_quantity or 0) - item.quantity, 0)


async def consume_order(db: AsyncSession, order: Order):
    """Descuenta existencia y apartado al enviar el pedido"""
    async for item, row in _reserved_rows(db, order):
        row.quantity = max((row.quantity or 0) - item.quantity, 0)
        row.reserved_quantity = max((row.reserved_quantity or 0) - item.quantity, 0)


async def apply_status_change(db: AsyncSession, order: Order, previous: str, new: str):
    """Efectos de inventario de un cambio de status ya validado"""
    if new == OrderStatus.SHIPPED.value:
        await consume_order(db, order)
    elif new == OrderStatus.CANCELLED.value and previous in (
        OrderStatus.PENDING.value, OrderStatus.PROCESSING.value
    ):
        await release_order(db, order)
