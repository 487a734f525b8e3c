"""
TREE Uniformes - Security
Hash de contraseñas (bcrypt) y tokens de sesion (JWT)
"""
from datetime import datetime, timedelta
from typing import Optional

from jose import jwt, JWTError
import bcrypt

from .config import settings


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verifica password usando bcrypt"""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        # Hash corrupto o en formato desconocido
        return False


def get_password_hash(password: str) -> str:
    """Genera hash bcrypt del password"""
    return bcrypt.hashpw(
        password.encode('utf-8'),
        bcrypt.gensalt(12)
    ).decode('utf-8')


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Crea JWT para autenticacion de clientes y administradores"""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_access_token(token: str) -> Optional[dict]:
    """Verifica JWT token"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
