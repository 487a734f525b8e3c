"""
TREE Uniformes - Content Models
Secciones por industria y mensajes de contacto
"""
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Text, Integer

from storefront.database import Base


class IndustrySection(Base):
    """Seccion de la portada dedicada a una industria"""
    __tablename__ = "industry_sections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    subtitle = Column(String(300))
    industry = Column(String(100), nullable=False)
    description = Column(Text)
    image_url = Column(Text)
    background_color = Column(String(7), default="#1F4287")
    text_color = Column(String(7), default="#FFFFFF")
    link_url = Column(String(500))
    button_text = Column(String(100), default="Explorar productos")
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "industry": self.industry,
            "description": self.description,
            "image_url": self.image_url,
            "background_color": self.background_color,
            "text_color": self.text_color,
            "link_url": self.link_url,
            "button_text": self.button_text,
            "is_active": self.is_active,
            "sort_order": self.sort_order,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class ContactMessage(Base):
    """Mensaje del formulario de contacto"""
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20))
    subject = Column(String(200))
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    responded_at = Column(DateTime)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "subject": self.subject,
            "message": self.message,
            "is_read": self.is_read,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "responded_at": self.responded_at.isoformat() if self.responded_at else None,
        }
