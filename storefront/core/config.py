"""
TREE Uniformes - Configuration
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional
import secrets
from decimal import Decimal
from pathlib import Path
from dotenv import load_dotenv

# Carrega .env com override para sobrescrever variaveis do sistema
env_file = Path(__file__).parent.parent.parent / ".env"
if env_file.exists():
    load_dotenv(env_file, override=True)


class Settings(BaseSettings):
    # App
    APP_NAME: str = "TREE Uniformes & Kodiak Industrial"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Database
    DATABASE_URL: Optional[str] = None
    STORE_DATABASE_URL: str = "sqlite+aiosqlite:///./tienda.db"

    @property
    def db_url(self) -> str:
        """Retorna DATABASE_URL si existe, si no STORE_DATABASE_URL"""
        url = self.DATABASE_URL or self.STORE_DATABASE_URL
        # Drivers sincronos de Postgres no sirven con el engine asincrono
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://"):]
        if url.startswith("postgresql://"):
            url = "postgresql+asyncpg://" + url[len("postgresql://"):]
        return url

    # Security
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Admin por defecto (se crea al arrancar si no existe ningun admin)
    ADMIN_USERNAME: str = "admin"
    ADMIN_EMAIL: str = "admin@treeuniformes.com"
    ADMIN_PASSWORD: str = "change-me-in-production"

    # CORS
    CORS_ORIGINS: list = ["*"]

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "10/minute"
    PUBLIC_FORM_RATE_LIMIT: str = "20/minute"

    # Email (Resend)
    RESEND_API_KEY: Optional[str] = None
    RESEND_API_URL: str = "https://api.resend.com/emails"
    EMAIL_FROM: str = "onboarding@resend.dev"
    EMAIL_FROM_NAME: str = "TREE Uniformes"
    ADMIN_NOTIFICATION_EMAIL: str = "pedidos@treeuniforme.com"
    EMAIL_TIMEOUT_SECONDS: float = 10.0

    # Email (SMTP, alternativa cuando no hay Resend)
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_TLS: bool = True
    SMTP_SSL: bool = False

    # Checkout
    CURRENCY_SYMBOL: str = "$"
    FREE_SHIPPING_THRESHOLD: Decimal = Decimal("500")
    FLAT_SHIPPING_COST: Decimal = Decimal("50")
    TAX_RATE: Decimal = Decimal("0.16")

    # Inventario
    LOW_STOCK_THRESHOLD: int = 5
    INVENTORY_RESERVATION_ENABLED: bool = True

    # Cotizaciones
    QUOTE_VALIDITY_DAYS: int = 30
    QUOTE_EXPIRY_SWEEP_ENABLED: bool = True
    QUOTE_EXPIRY_SWEEP_INTERVAL_SECONDS: int = 3600

    # Uploads
    UPLOADS_DIR: Optional[str] = None
    MAX_UPLOAD_SIZE_BYTES: int = 10 * 1024 * 1024

    # URLs publicas
    APP_URL: str = "https://www.treeuniformes.com"

    class Config:
        extra = "ignore"
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
