"""
TREE Uniformes - Cart API
Totales del carrito con precios del catalogo
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db
from storefront.models import Product
from storefront.schemas import CartTotalsRequest
from storefront.services.cart import Cart

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.post("/totals")
async def cart_totals(data: CartTotalsRequest, db: AsyncSession = Depends(get_db)):
    """Recalcula el carrito del cliente con los precios vigentes"""
    cart = Cart()
    for line in data.items:
        product = await db.get(Product, line.product_id)
        if not product or not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Producto {line.product_id} no disponible"
            )
        cart.add_item(
            product_id=product.id,
            name=product.name,
            price=product.price,
            quantity=line.quantity,
            size=line.size,
            color=line.color,
            image=product.primary_image or None,
            gender=product.gender
        )
    return cart.to_dict()
