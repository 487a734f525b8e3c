"""
TREE Uniformes - Auth API
Autenticacion de clientes y administradores
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_

from storefront.database import get_db
from storefront.models import User
from storefront.schemas import LoginRequest, LoginResponse, ProfileUpdate
from storefront.core import (
    verify_password,
    get_password_hash,
    create_access_token,
    verify_access_token,
    limiter,
    settings
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = "No autorizado") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"}
    )


async def _user_from_token(token: str, db: AsyncSession) -> Optional[User]:
    payload = verify_access_token(token)
    if not payload:
        return None

    result = await db.execute(select(User).where(User.id == payload.get("sub")))
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        return None
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Dependency para obtener el usuario autenticado"""
    if not credentials:
        raise _unauthorized()

    user = await _user_from_token(credentials.credentials, db)
    if not user:
        raise _unauthorized("Token invalido o expirado")
    return user


async def get_current_admin(user: User = Depends(get_current_user)) -> User:
    """Dependency para rutas de administracion"""
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Se requieren permisos de administrador"
        )
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Usuario si viene un token valido; None en compras como invitado"""
    if not credentials:
        return None
    return await _user_from_token(credentials.credentials, db)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(request: Request, data: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login con usuario o email"""
    result = await db.execute(
        select(User).where(or_(User.username == data.username, User.email == data.username))
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(data.password, user.hashed_password):
        logger.warning(f"Intento de login fallido para {data.username}")
        raise _unauthorized("Usuario o contraseña incorrectos")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="La cuenta esta desactivada"
        )

    user.last_login_at = datetime.utcnow()
    await db.commit()

    access_token = create_access_token(data={"sub": user.id, "role": user.role})

    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        user=user.to_dict()
    )


@router.get("/me")
async def get_me(user: User = Depends(get_current_user)):
    """Datos del usuario actual"""
    return user.to_dict()


@router.put("/me")
async def update_me(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Edicion del perfil propio"""
    update_data = data.model_dump(exclude_unset=True)
    password = update_data.pop("password", None)

    for field, value in update_data.items():
        setattr(user, field, value)
    if password:
        user.hashed_password = get_password_hash(password)

    await db.commit()
    await db.refresh(user)
    return user.to_dict()
