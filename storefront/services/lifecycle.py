"""
TREE Uniformes - Lifecycle
Maquinas de estado de pedidos y cotizaciones
"""
from typing import Dict, FrozenSet

from storefront.models import OrderStatus, QuoteStatus


class InvalidTransition(Exception):
    """Cambio de status no permitido"""

    def __init__(self, kind: str, current: str, target: str):
        self.kind = kind
        self.current = current
        self.target = target
        super().__init__(f"Transicion de {kind} no permitida: {current} -> {target}")


ORDER_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    OrderStatus.PENDING.value: frozenset({OrderStatus.PROCESSING.value, OrderStatus.CANCELLED.value}),
    OrderStatus.PROCESSING.value: frozenset({OrderStatus.SHIPPED.value, OrderStatus.CANCELLED.value}),
    OrderStatus.SHIPPED.value: frozenset({OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value}),
    OrderStatus.DELIVERED.value: frozenset(),
    OrderStatus.CANCELLED.value: frozenset(),
}

QUOTE_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    QuoteStatus.DRAFT.value: frozenset({
        QuoteStatus.SENT.value, QuoteStatus.REJECTED.value, QuoteStatus.EXPIRED.value
    }),
    QuoteStatus.SENT.value: frozenset({
        QuoteStatus.ACCEPTED.value, QuoteStatus.REJECTED.value, QuoteStatus.EXPIRED.value
    }),
    QuoteStatus.ACCEPTED.value: frozenset(),
    QuoteStatus.REJECTED.value: frozenset(),
    QuoteStatus.EXPIRED.value: frozenset(),
}


def _check(kind: str, table: Dict[str, FrozenSet[str]], current: str, target: str) -> bool:
    """
    True si hay cambio real, False si target == current (no-op).
    Lanza InvalidTransition si el cambio no esta en la tabla.
    """
    if target not in table:
        raise InvalidTransition(kind, current, target)
    if target == current:
        return False
    if target not in table.get(current, frozenset()):
        raise InvalidTransition(kind, current, target)
    return True


def check_order_transition(current: str, target: str) -> bool:
    return _check("pedido", ORDER_TRANSITIONS, current or OrderStatus.PENDING.value, target)


def check_quote_transition(current: str, target: str) -> bool:
    return _check("cotizacion", QUOTE_TRANSITIONS, current or QuoteStatus.DRAFT.value, target)


def is_terminal_order_status(status: str) -> bool:
    return not ORDER_TRANSITIONS.get(status)
