from .auth import (
    LoginRequest,
    LoginResponse,
    CustomerRegistration,
    ProfileUpdate,
    UserAdminUpdate
)
from .catalog import (
    CategoryCreate,
    CategoryUpdate,
    BrandCreate,
    BrandUpdate,
    SizeCreate,
    ColorCreate,
    GarmentTypeCreate,
    SizeRangeCreate,
    ProductCreate,
    ProductUpdate,
    ProductOrderUpdate,
    ProductColorImageCreate,
    ProductColorImageUpdate
)
from .inventory import InventoryCreate, InventoryUpdate, InventoryUpsert
from .order import (
    ShippingAddress,
    OrderItemRequest,
    OrderCreate,
    OrderStatusUpdate,
    CartLine,
    CartTotalsRequest
)
from .quote import (
    QuoteItemCreate,
    QuoteCreate,
    QuoteUpdate,
    QuoteRequestProduct,
    CustomerInfo,
    QuoteRequest
)
from .content import IndustrySectionCreate, IndustrySectionUpdate, ContactMessageCreate

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "CustomerRegistration",
    "ProfileUpdate",
    "UserAdminUpdate",
    "CategoryCreate",
    "CategoryUpdate",
    "BrandCreate",
    "BrandUpdate",
    "SizeCreate",
    "ColorCreate",
    "GarmentTypeCreate",
    "SizeRangeCreate",
    "ProductCreate",
    "ProductUpdate",
    "ProductOrderUpdate",
    "ProductColorImageCreate",
    "ProductColorImageUpdate",
    "InventoryCreate",
    "InventoryUpdate",
    "InventoryUpsert",
    "ShippingAddress",
    "OrderItemRequest",
    "OrderCreate",
    "OrderStatusUpdate",
    "CartLine",
    "CartTotalsRequest",
    "QuoteItemCreate",
    "QuoteCreate",
    "QuoteUpdate",
    "QuoteRequestProduct",
    "CustomerInfo",
    "QuoteRequest",
    "IndustrySectionCreate",
    "IndustrySectionUpdate",
    "ContactMessageCreate"
]
