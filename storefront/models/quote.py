"""
TREE Uniformes - Quote Models
Cotizaciones (presupuestos) con partidas normalizadas
"""
import enum
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Integer, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from storefront.database import Base
from storefront.services.pricing import format_money


class QuoteStatus(str, enum.Enum):
    """Status de la cotizacion"""
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


class QuoteUrgency(str, enum.Enum):
    NORMAL = "normal"
    URGENT = "urgent"
    VERY_URGENT = "very_urgent"


QUOTE_STATUS_LABELS = {
    QuoteStatus.DRAFT.value: "Borrador",
    QuoteStatus.SENT.value: "Enviada",
    QuoteStatus.ACCEPTED.value: "Aceptada",
    QuoteStatus.REJECTED.value: "Rechazada",
    QuoteStatus.EXPIRED.value: "Expirado",
}

# Status que aun pueden vencer
OPEN_QUOTE_STATUSES = (QuoteStatus.DRAFT.value, QuoteStatus.SENT.value)


class Quote(Base):
    """Modelo de cotizacion"""
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    quote_number = Column(String(50), unique=True, nullable=False, index=True)

    customer_id = Column(String(36), ForeignKey("users.id"), index=True)
    customer = relationship("User", back_populates="quotes")
    customer_email = Column(String(255))
    customer_name = Column(String(255))
    customer_company = Column(String(200))

    subtotal = Column(Numeric(10, 2), nullable=False)
    tax = Column(Numeric(10, 2), default=0)
    total = Column(Numeric(10, 2), nullable=False)

    valid_until = Column(DateTime, index=True)
    urgency = Column(String(20), default=QuoteUrgency.NORMAL.value)
    preferred_delivery_date = Column(DateTime)
    notes = Column(Text)
    status = Column(String(20), default=QuoteStatus.DRAFT.value, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = relationship(
        "QuoteItem",
        back_populates="quote",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="QuoteItem.id",
    )

    def is_expired(self, now: datetime = None) -> bool:
        """Vencida por status o por fecha de validez"""
        if self.status == QuoteStatus.EXPIRED.value:
            return True
        if self.status not in OPEN_QUOTE_STATUSES or not self.valid_until:
            return False
        return (now or datetime.utcnow()) > self.valid_until

    def days_until_expiry(self) -> int:
        if not self.valid_until:
            return 999
        delta = self.valid_until - datetime.utcnow()
        return max(0, delta.days)

    def to_dict(self):
        return {
            "id": self.id,
            "quote_number": self.quote_number,
            "customer_id": self.customer_id,
            "customer_email": self.customer_email,
            "customer_name": self.customer_name,
            "customer_company": self.customer_company,
            "items": [item.to_dict() for item in self.items],
            "subtotal": format_money(self.subtotal),
            "tax": format_money(self.tax),
            "total": format_money(self.total),
            "valid_until": self.valid_until.isoformat() if self.valid_until else None,
            "urgency": self.urgency,
            "preferred_delivery_date": self.preferred_delivery_date.isoformat() if self.preferred_delivery_date else None,
            "notes": self.notes,
            "status": self.status,
            "status_label": QUOTE_STATUS_LABELS.get(self.status, self.status),
            "is_expired": self.is_expired(),
            "days_until_expiry": self.days_until_expiry(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class QuoteItem(Base):
    """Partida de cotizacion"""
    __tablename__ = "quote_items"

    id = Column(Integer, primary_key=True, autoincrement=True)

    quote_id = Column(Integer, ForeignKey("quotes.id"), nullable=False, index=True)
    quote = relationship("Quote", back_populates="items")

    product_id = Column(Integer, ForeignKey("products.id"))
    product_name = Column(String(200))
    sku = Column(String(50))
    size = Column(String(20))
    color = Column(String(50))

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    notes = Column(Text)

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "sku": self.sku,
            "size": self.size,
            "color": self.color,
            "quantity": self.quantity,
            "unit_price": format_money(self.unit_price),
            "total_price": format_money(self.total_price),
            "notes": self.notes,
        }
