"""
TREE Uniformes - Cart
Carrito como contenedor de estado explicito con acciones y suscriptores.

El carrito vive del lado del cliente; aqui se modela con las mismas reglas
que el checkout (llave por producto/talla/color, envio gratis arriba del
umbral, IVA) y puede persistirse en un archivo JSON.
"""
import json
import logging
from dataclasses import dataclass, asdict, field
from decimal import Decimal
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .pricing import checkout_totals, line_total, to_decimal, Totals, quantize

logger = logging.getLogger(__name__)


def item_key(product_id, size: Optional[str] = None, color: Optional[str] = None) -> str:
    """Llave unica de la partida: <producto>-<talla>-<color>"""
    return f"{product_id}-{size or ''}-{color or ''}"


@dataclass
class CartItem:
    product_id: int
    name: str
    price: Decimal
    quantity: int = 1
    size: Optional[str] = None
    color: Optional[str] = None
    image: Optional[str] = None
    gender: Optional[str] = None
    key: str = field(default="")

    def __post_init__(self):
        self.price = quantize(self.price)
        if not self.key:
            self.key = item_key(self.product_id, self.size, self.color)

    @property
    def total(self) -> Decimal:
        return line_total(self.price, self.quantity)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["price"] = f"{self.price:.2f}"
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        return cls(
            product_id=data["product_id"],
            name=data.get("name", ""),
            price=to_decimal(data.get("price")),
            quantity=int(data.get("quantity", 1)),
            size=data.get("size"),
            color=data.get("color"),
            image=data.get("image"),
            gender=data.get("gender"),
            key=data.get("key", ""),
        )


class Cart:
    """Contenedor de estado del carrito"""

    def __init__(self, items: Optional[List[CartItem]] = None):
        self._items: Dict[str, CartItem] = {}
        self._listeners: List[Callable[["Cart"], None]] = []
        for item in items or []:
            self._items[item.key] = item

    # Suscripciones

    def subscribe(self, listener: Callable[["Cart"], None]) -> Callable[[], None]:
        """Registra un listener; retorna la funcion para darlo de baja"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener(self)

    # Acciones

    def add_item(
        self,
        product_id: int,
        name: str,
        price,
        quantity: int = 1,
        size: Optional[str] = None,
        color: Optional[str] = None,
        image: Optional[str] = None,
        gender: Optional[str] = None
    ) -> CartItem:
        """Agrega al carrito; si la variante ya esta, suma la cantidad"""
        if quantity < 1:
            raise ValueError("La cantidad debe ser al menos 1")

        key = item_key(product_id, size, color)
        existing = self._items.get(key)
        if existing:
            existing.quantity += quantity
            item = existing
        else:
            item = CartItem(
                product_id=product_id,
                name=name,
                price=price,
                quantity=quantity,
                size=size,
                color=color,
                image=image,
                gender=gender,
                key=key,
            )
            self._items[key] = item

        self._notify()
        return item

    def remove_item(self, key: str):
        if self._items.pop(key, None) is not None:
            self._notify()

    def update_quantity(self, key: str, quantity: int):
        """Cantidad <= 0 elimina la partida"""
        if quantity <= 0:
            self.remove_item(key)
            return
        item = self._items.get(key)
        if item:
            item.quantity = quantity
            self._notify()

    def clear(self):
        self._items = {}
        self._notify()

    # Consultas

    @property
    def items(self) -> List[CartItem]:
        return list(self._items.values())

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items.values())

    @property
    def subtotal(self) -> Decimal:
        return quantize(sum((item.total for item in self._items.values()), Decimal("0")))

    def is_empty(self) -> bool:
        return not self._items

    def totals(self) -> Totals:
        return checkout_totals(self.subtotal)

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "item_count": self.item_count,
            **self.totals().to_dict(),
        }

    def to_order_request(self, **customer) -> dict:
        """Payload para POST /api/orders"""
        return {
            **customer,
            "items": [
                {
                    "product_id": item.product_id,
                    "size": item.size,
                    "color": item.color,
                    "gender": item.gender,
                    "quantity": item.quantity,
                    "price": f"{item.price:.2f}",
                }
                for item in self.items
            ],
        }

    def to_quote_request(self, **extra) -> dict:
        """Payload para POST /api/quotes/request"""
        return {
            **extra,
            "products": [
                {
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "size": item.size or "",
                    "color": item.color or "",
                }
                for item in self.items
            ],
        }


class CartStore:
    """Persistencia del carrito en un archivo JSON"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Cart:
        if not self.path.exists():
            return Cart()
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return Cart([CartItem.from_dict(raw) for raw in data.get("items", [])])
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Carrito guardado ilegible en {self.path}, se inicia vacio: {e}")
            return Cart()

    def save(self, cart: Cart):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump({"items": [item.to_dict() for item in cart.items]}, f, indent=2, ensure_ascii=False)

    def attach(self, cart: Cart) -> Callable[[], None]:
        """Guarda el carrito automaticamente tras cada accion"""
        return cart.subscribe(self.save)
