"""
TREE Uniformes - Catalog Models
Categorias, marcas, tallas, colores, tipos de prenda y productos
"""
import enum
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Text, Integer, Numeric, ForeignKey, JSON
from sqlalchemy.orm import relationship

from storefront.database import Base
from storefront.services.pricing import format_money


class Gender(str, enum.Enum):
    """Genero de la prenda"""
    MASCULINO = "masculino"
    FEMENINO = "femenino"
    UNISEX = "unisex"


class Category(Base):
    """Categoria de producto"""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)

    products = relationship("Product", back_populates="category")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Brand(Base):
    """Marca (TREE, Kodiak, ...)"""
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text)
    logo = Column(Text)  # URL o imagen base64
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "logo": self.logo,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Size(Base):
    __tablename__ = "sizes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(20), nullable=False, unique=True)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "sort_order": self.sort_order}


class Color(Base):
    __tablename__ = "colors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)
    hex_code = Column(String(7))
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "hex_code": self.hex_code}


class GarmentType(Base):
    """Tipo de prenda (camisa, pantalon, calzado...)"""
    __tablename__ = "garment_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)
    display_name = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    size_ranges = relationship("SizeRange", back_populates="garment_type")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "display_name": self.display_name,
            "is_active": self.is_active,
        }


class SizeRange(Base):
    """Rango de tallas por tipo de prenda y genero"""
    __tablename__ = "size_ranges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    garment_type_id = Column(Integer, ForeignKey("garment_types.id"))
    garment_type = relationship("GarmentType", back_populates="size_ranges")

    gender = Column(String(20), nullable=False)
    size_type = Column(String(50), nullable=False)  # standard, waist, clothing, shoes
    min_size = Column(Integer)
    max_size = Column(Integer)
    size_list = Column(JSON, default=list)  # tallas no numericas: XS, S, M...
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "garment_type_id": self.garment_type_id,
            "gender": self.gender,
            "size_type": self.size_type,
            "min_size": self.min_size,
            "max_size": self.max_size,
            "size_list": self.size_list or [],
            "is_active": self.is_active,
        }


class Product(Base):
    """Producto del catalogo"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    sku = Column(String(50), unique=True, index=True)
    description = Column(Text)

    category_id = Column(Integer, ForeignKey("categories.id"))
    category = relationship("Category", back_populates="products")

    # Marca por nombre (coincide con Brand.name, no es FK)
    brand = Column(String(100), index=True)

    gender = Column(String(20))
    genders = Column(JSON, default=list, nullable=False)

    garment_type_id = Column(Integer, ForeignKey("garment_types.id"))

    price = Column(Numeric(10, 2), nullable=False)
    images = Column(JSON, default=list)
    sizes = Column(JSON, default=list)
    colors = Column(JSON, default=list)

    # Merchandising
    is_active = Column(Boolean, default=True, index=True)
    is_featured = Column(Boolean, default=False)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    color_images = relationship(
        "ProductColorImage",
        back_populates="product",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="ProductColorImage.sort_order",
    )
    inventory = relationship("Inventory", back_populates="product", cascade="all, delete-orphan")

    @property
    def primary_image(self) -> str:
        """Imagen principal: primero la del color primario, luego las del producto"""
        loaded = self.__dict__.get("color_images") or []
        if loaded:
            primary = next((ci for ci in loaded if ci.is_primary), loaded[0])
            if primary.images:
                return primary.images[0]
        if self.images:
            return self.images[0]
        return ""

    def to_dict(self, include_color_images: bool = True):
        data = {
            "id": self.id,
            "name": self.name,
            "sku": self.sku,
            "description": self.description,
            "category_id": self.category_id,
            "brand": self.brand,
            "gender": self.gender,
            "genders": self.genders or [],
            "garment_type_id": self.garment_type_id,
            "price": format_money(self.price),
            "images": self.images or [],
            "sizes": self.sizes or [],
            "colors": self.colors or [],
            "is_active": self.is_active,
            "is_featured": self.is_featured,
            "display_order": self.display_order,
            "primary_image": self.primary_image,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_color_images:
            data["color_images"] = [ci.to_dict() for ci in self.__dict__.get("color_images") or []]
        return data


class ProductColorImage(Base):
    """Imagenes especificas de un color del producto"""
    __tablename__ = "product_color_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    product = relationship("Product", back_populates="color_images")

    color_id = Column(Integer, ForeignKey("colors.id"), nullable=False)
    color = relationship("Color", lazy="selectin")

    images = Column(JSON, default=list, nullable=False)
    is_primary = Column(Boolean, default=False)
    sort_order = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        color = self.__dict__.get("color")
        return {
            "id": self.id,
            "product_id": self.product_id,
            "color_id": self.color_id,
            "color_name": color.name if color else None,
            "hex_code": color.hex_code if color else None,
            "images": self.images or [],
            "is_primary": self.is_primary,
            "sort_order": self.sort_order,
        }
