from .config import settings, get_settings
from .security import (
    create_access_token,
    verify_access_token,
    verify_password,
    get_password_hash
)
from .email import email_service
from .rate_limit import limiter

__all__ = [
    "settings",
    "get_settings",
    "create_access_token",
    "verify_access_token",
    "verify_password",
    "get_password_hash",
    "email_service",
    "limiter"
]
