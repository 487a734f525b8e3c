from .user import User, UserRole
from .catalog import (
    Gender,
    Category,
    Brand,
    Size,
    Color,
    GarmentType,
    SizeRange,
    Product,
    ProductColorImage
)
from .inventory import Inventory
from .order import Order, OrderItem, OrderStatus, ORDER_STATUS_LABELS
from .quote import Quote, QuoteItem, QuoteStatus, QuoteUrgency, QUOTE_STATUS_LABELS, OPEN_QUOTE_STATUSES
from .content import IndustrySection, ContactMessage

__all__ = [
    "User",
    "UserRole",
    "Gender",
    "Category",
    "Brand",
    "Size",
    "Color",
    "GarmentType",
    "SizeRange",
    "Product",
    "ProductColorImage",
    "Inventory",
    "Order",
    "OrderItem",
    "OrderStatus",
    "ORDER_STATUS_LABELS",
    "Quote",
    "QuoteItem",
    "QuoteStatus",
    "QuoteUrgency",
    "QUOTE_STATUS_LABELS",
    "OPEN_QUOTE_STATUSES",
    "IndustrySection",
    "ContactMessage"
]
