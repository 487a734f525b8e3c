"""
TREE Uniformes - Inventory Model
Existencias por producto, talla y color
"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey
from sqlalchemy.orm import relationship

from storefront.database import Base
from storefront.services.pricing import available_quantity, stock_status, STOCK_LABELS


class Inventory(Base):
    """Existencia de una variante (producto, talla, color)"""
    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True, autoincrement=True)

    product_id = Column(Integer, ForeignKey("products.id"), index=True)
    product = relationship("Product", back_populates="inventory")

    size = Column(String(20))
    color = Column(String(50))

    quantity = Column(Integer, nullable=False, default=0)
    # Apartado por pedidos aun no enviados
    reserved_quantity = Column(Integer, nullable=False, default=0)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def available(self) -> int:
        return available_quantity(self.quantity, self.reserved_quantity)

    @property
    def oversold(self) -> bool:
        return (self.reserved_quantity or 0) > (self.quantity or 0)

    def to_dict(self):
        status = stock_status(self.quantity, self.reserved_quantity)
        product = self.__dict__.get("product")
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": product.name if product else None,
            "size": self.size,
            "color": self.color,
            "quantity": self.quantity,
            "reserved_quantity": self.reserved_quantity,
            "available": self.available,
            "oversold": self.oversold,
            "stock_status": status,
            "stock_label": STOCK_LABELS[status],
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
