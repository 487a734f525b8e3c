"""
TREE Uniformes - Pricing
Montos en Decimal, totales de checkout y estado de stock
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union

from storefront.core.config import settings

CENT = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Optional[Number]) -> Decimal:
    """Convierte a Decimal; None y cadenas vacias valen 0"""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        # float pasa por str para no arrastrar el error binario
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Monto invalido: {value!r}")


def quantize(value: Optional[Number]) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Optional[Number]) -> Optional[str]:
    """Decimal -> "374.00" (None se conserva)"""
    if value is None:
        return None
    return f"{quantize(value):.2f}"


def line_total(unit_price: Number, quantity: int) -> Decimal:
    return quantize(to_decimal(unit_price) * quantity)


def shipping_for(subtotal: Number) -> Decimal:
    """Envio gratis arriba del umbral, tarifa fija en otro caso"""
    if to_decimal(subtotal) > settings.FREE_SHIPPING_THRESHOLD:
        return quantize(0)
    return quantize(settings.FLAT_SHIPPING_COST)


def tax_for(subtotal: Number) -> Decimal:
    """IVA sobre el subtotal"""
    return quantize(to_decimal(subtotal) * settings.TAX_RATE)


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal

    def to_dict(self):
        return {
            "subtotal": format_money(self.subtotal),
            "shipping": format_money(self.shipping),
            "tax": format_money(self.tax),
            "total": format_money(self.total),
        }


def checkout_totals(
    subtotal: Number,
    shipping: Optional[Number] = None,
    tax: Optional[Number] = None
) -> Totals:
    """
    Totales de un pedido.

    Si shipping o tax no se informan se calculan con las reglas de checkout
    (envio gratis > 500, IVA 16%). total = subtotal + shipping + tax.
    """
    subtotal = quantize(subtotal)
    shipping = shipping_for(subtotal) if shipping is None else quantize(shipping)
    tax = tax_for(subtotal) if tax is None else quantize(tax)
    return Totals(subtotal, shipping, tax, quantize(subtotal + shipping + tax))


# Estados de stock (badge del inventario)
STOCK_OUT = "sin_stock"
STOCK_LOW = "bajo_stock"
STOCK_OK = "en_stock"

STOCK_LABELS = {
    STOCK_OUT: "Sin stock",
    STOCK_LOW: "Bajo stock",
    STOCK_OK: "En stock",
}


def available_quantity(quantity: Optional[int], reserved: Optional[int]) -> int:
    """Disponible = existencia - reservado, nunca negativo"""
    return max((quantity or 0) - (reserved or 0), 0)


def stock_status(quantity: Optional[int], reserved: Optional[int], low_threshold: Optional[int] = None) -> str:
    low_threshold = settings.LOW_STOCK_THRESHOLD if low_threshold is None else low_threshold
    available = (quantity or 0) - (reserved or 0)
    if available <= 0:
        return STOCK_OUT
    if available <= low_threshold:
        return STOCK_LOW
    return STOCK_OK
