"""
TREE Uniformes - User Model
Clientes y administradores de la tienda
"""
import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Text
from sqlalchemy.orm import relationship

from storefront.database import Base


class UserRole(str, enum.Enum):
    """Roles de usuario"""
    ADMIN = "admin"
    CUSTOMER = "customer"


class User(Base):
    """Modelo de usuario (admin o cliente)"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Credenciales (clientes de cotizacion sin cuenta no tienen password)
    username = Column(String(50), unique=True, index=True)
    email = Column(String(255), unique=True, index=True)
    hashed_password = Column(String(255))

    # Datos personales
    first_name = Column(String(100))
    last_name = Column(String(100))
    role = Column(String(20), nullable=False, default=UserRole.CUSTOMER.value, index=True)
    phone = Column(String(20))
    company = Column(String(200))

    # Direccion
    address = Column(Text)
    city = Column(String(100))
    state = Column(String(100))
    zip_code = Column(String(10))

    # Control
    is_active = Column(Boolean, default=True)
    last_login_at = Column(DateTime)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    orders = relationship("Order", back_populates="customer")
    quotes = relationship("Quote", back_populates="customer")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "role": self.role,
            "phone": self.phone,
            "company": self.company,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "is_active": self.is_active,
            "has_password": bool(self.hashed_password),
            "last_login_at": self.last_login_at.isoformat() if self.last_login_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
