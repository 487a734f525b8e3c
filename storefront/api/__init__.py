from .auth import router as auth_router
from .customers import router as customers_router, register_router
from .catalog import router as catalog_router
from .products import router as products_router
from .inventory import router as inventory_router
from .orders import router as orders_router
from .quotes import router as quotes_router
from .cart import router as cart_router
from .content import industry_router, contact_router
from .dashboard import router as dashboard_router
from .uploads import router as uploads_router

__all__ = [
    "auth_router",
    "customers_router",
    "register_router",
    "catalog_router",
    "products_router",
    "inventory_router",
    "orders_router",
    "quotes_router",
    "cart_router",
    "industry_router",
    "contact_router",
    "dashboard_router",
    "uploads_router"
]
