"""
TREE Uniformes - Order Models
Pedidos y sus partidas
"""
import enum
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Integer, Numeric, ForeignKey, JSON
from sqlalchemy.orm import relationship

from storefront.database import Base
from storefront.services.pricing import format_money


class OrderStatus(str, enum.Enum):
    """Status del pedido"""
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


ORDER_STATUS_LABELS = {
    OrderStatus.PENDING.value: "Pendiente",
    OrderStatus.PROCESSING.value: "Procesando",
    OrderStatus.SHIPPED.value: "Enviado",
    OrderStatus.DELIVERED.value: "Entregado",
    OrderStatus.CANCELLED.value: "Cancelado",
}


class Order(Base):
    """Modelo de pedido"""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_number = Column(String(50), unique=True, nullable=False, index=True)

    # Cliente (nulo en compras como invitado)
    customer_id = Column(String(36), ForeignKey("users.id"), index=True)
    customer = relationship("User", back_populates="orders")
    customer_email = Column(String(255))
    customer_name = Column(String(255))
    customer_phone = Column(String(20))

    status = Column(String(20), default=OrderStatus.PENDING.value, index=True)

    # Montos
    subtotal = Column(Numeric(10, 2), nullable=False)
    shipping = Column(Numeric(10, 2), default=0)
    tax = Column(Numeric(10, 2), default=0)
    total = Column(Numeric(10, 2), nullable=False)

    shipping_address = Column(JSON)
    payment_method = Column(String(50))
    notes = Column(Text)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = relationship(
        "OrderItem",
        back_populates="order",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    @property
    def status_label(self) -> str:
        return ORDER_STATUS_LABELS.get(self.status, self.status)

    def to_dict(self, include_items: bool = True):
        data = {
            "id": self.id,
            "order_number": self.order_number,
            "customer_id": self.customer_id,
            "customer_email": self.customer_email,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "status": self.status,
            "status_label": self.status_label,
            "subtotal": format_money(self.subtotal),
            "shipping": format_money(self.shipping),
            "tax": format_money(self.tax),
            "total": format_money(self.total),
            "shipping_address": self.shipping_address,
            "payment_method": self.payment_method,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


class OrderItem(Base):
    """Partida de pedido (datos del producto desnormalizados)"""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)

    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    order = relationship("Order", back_populates="items")

    product_id = Column(Integer, ForeignKey("products.id"), index=True)
    product_name = Column(String(200))
    sku = Column(String(50))
    size = Column(String(20))
    color = Column(String(50))
    gender = Column(String(20))

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)

    # Existencia apartada para esta partida (si la variante lleva inventario)
    inventory_id = Column(Integer, ForeignKey("inventory.id"))

    def to_dict(self):
        return {
            "id": self.id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "sku": self.sku,
            "size": self.size,
            "color": self.color,
            "gender": self.gender,
            "quantity": self.quantity,
            "unit_price": format_money(self.unit_price),
            "total_price": format_money(self.total_price),
            "inventory_id": self.inventory_id,
        }
