"""
TREE Uniformes - Main Application
API de la tienda de uniformes y ropa industrial
"""
import asyncio
import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.core import settings, limiter
from storefront.core.quote_expiry import run_sweeper
from storefront.database import init_db
from storefront.api import (
    auth_router,
    customers_router,
    register_router,
    catalog_router,
    products_router,
    inventory_router,
    orders_router,
    quotes_router,
    cart_router,
    industry_router,
    contact_router,
    dashboard_router,
    uploads_router
)
from storefront.api.uploads import uploads_path

# Rate limiting
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Ciclo de vida de la aplicacion"""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    await init_db()
    logger.info("Database initialized")

    sweeper_task = None
    if settings.QUOTE_EXPIRY_SWEEP_ENABLED:
        sweeper_task = asyncio.create_task(run_sweeper())

    yield

    # Shutdown
    logger.info("Shutting down...")
    if sweeper_task:
        sweeper_task.cancel()
        try:
            await sweeper_task
        except asyncio.CancelledError:
            pass


# Middleware de headers de seguridad
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Agrega headers de seguridad a todas las respuestas"""
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Sin cache para autenticacion y datos de clientes
        path = request.url.path
        if "/auth" in path or "/customers" in path or "/register" in path:
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
            response.headers["Pragma"] = "no-cache"
        return response


# Crea la aplicacion
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Catalogo, inventario, pedidos y cotizaciones de TREE Uniformes & Kodiak Industrial",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)

# Rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Headers de seguridad (antes del CORS)
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth_router, prefix="/api")
app.include_router(register_router, prefix="/api")
app.include_router(customers_router, prefix="/api")
app.include_router(catalog_router, prefix="/api")
app.include_router(products_router, prefix="/api")
app.include_router(inventory_router, prefix="/api")
app.include_router(orders_router, prefix="/api")
app.include_router(quotes_router, prefix="/api")
app.include_router(cart_router, prefix="/api")
app.include_router(industry_router, prefix="/api")
app.include_router(contact_router, prefix="/api")
app.include_router(dashboard_router, prefix="/api")
app.include_router(uploads_router, prefix="/api")

# Archivos subidos (imagenes de productos, logos de marcas)
uploads_dir = uploads_path()
os.makedirs(uploads_dir, exist_ok=True)
logger.info(f"Uploads directory: {uploads_dir}")
app.mount("/uploads", StaticFiles(directory=uploads_dir), name="uploads")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health():
    """Health check"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "storefront.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
