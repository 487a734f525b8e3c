"""
TREE Uniformes - Folios
Numeros de pedido, cotizacion y SKU
"""
import secrets
import string
import time
from datetime import datetime
from typing import Optional

ORDER_PREFIX = "UL"
QUOTE_PREFIX = "COT"

_BASE36 = string.digits + string.ascii_lowercase


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def _folio(prefix: str, now: Optional[datetime], millis: Optional[int]) -> str:
    now = now or datetime.utcnow()
    millis = int(time.time() * 1000) if millis is None else millis
    return f"{prefix}-{now.year}-{str(millis)[-6:].zfill(6)}"


def generate_order_number(now: Optional[datetime] = None, millis: Optional[int] = None) -> str:
    """Formato UL-<año>-<ultimos 6 digitos del timestamp en ms>"""
    return _folio(ORDER_PREFIX, now, millis)


def generate_quote_number(now: Optional[datetime] = None, millis: Optional[int] = None) -> str:
    """Formato COT-<año>-<ultimos 6 digitos del timestamp en ms>"""
    return _folio(QUOTE_PREFIX, now, millis)


def bump_number(number: str) -> str:
    """Siguiente folio libre cuando el generado ya existe (mismo milisegundo)"""
    prefix, _, seq = number.rpartition("-")
    width = len(seq)
    return f"{prefix}-{str((int(seq) + 1) % 10 ** width).zfill(width)}"


def generate_sku(millis: Optional[int] = None) -> str:
    """SKU automatico: PRD-<timestamp base36>-<3 caracteres aleatorios>"""
    millis = int(time.time() * 1000) if millis is None else millis
    random_part = "".join(secrets.choice(_BASE36) for _ in range(3))
    return f"PRD-{to_base36(millis)}-{random_part}".upper()
