"""
TREE Uniformes - Customers API
Registro desde la tienda y administracion de clientes
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError

from storefront.database import get_db
from storefront.models import User, UserRole
from storefront.schemas import CustomerRegistration, UserAdminUpdate
from storefront.core import get_password_hash, create_access_token, limiter, settings
from storefront.api.auth import get_current_admin

logger = logging.getLogger(__name__)

register_router = APIRouter(prefix="/register", tags=["Registration"])
router = APIRouter(prefix="/customers", tags=["Customers"])


@register_router.post("/customer", status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.PUBLIC_FORM_RATE_LIMIT)
async def register_customer(
    request: Request,
    data: CustomerRegistration,
    db: AsyncSession = Depends(get_db)
):
    """
    Registro publico de cliente.

    Cualquier email existente se rechaza, incluso el de un cliente sin
    contraseña creado por una solicitud de cotizacion: registrarse no
    demuestra ser dueño de ese correo.
    """
    email = data.email.lower()
    result = await db.execute(select(User).where(func.lower(User.email) == email))
    user = result.scalar_one_or_none()

    if user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El email ya está registrado"
        )

    if data.username:
        result = await db.execute(select(User).where(User.username == data.username))
        existing = result.scalar_one_or_none()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El usuario ya existe"
            )

    user = User(
        email=email,
        username=data.username,
        first_name=data.first_name,
        last_name=data.last_name,
        role=UserRole.CUSTOMER.value,
        phone=data.phone,
        company=data.company,
        address=data.address,
        city=data.city,
        state=data.state,
        zip_code=data.zip_code,
        hashed_password=get_password_hash(data.password) if data.password else None,
        is_active=True
    )
    db.add(user)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El email ya está registrado"
        )
    await db.refresh(user)
    logger.info(f"Cliente registrado: {user.email}")

    response = {"user": user.to_dict()}
    if user.hashed_password:
        response["access_token"] = create_access_token(data={"sub": user.id, "role": user.role})
        response["token_type"] = "bearer"
    return response


@router.get("")
async def list_customers(
    search: Optional[str] = None,
    role: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    """Lista clientes (admin)"""
    query = select(User)
    if role:
        query = query.where(User.role == role)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            User.email.ilike(pattern),
            User.first_name.ilike(pattern),
            User.last_name.ilike(pattern),
            User.company.ilike(pattern)
        ))

    result = await db.execute(
        query.order_by(User.created_at.desc()).offset(offset).limit(limit)
    )
    return [u.to_dict() for u in result.scalars().all()]


@router.put("/{user_id}")
async def update_customer(
    user_id: str,
    data: UserAdminUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    """Activa/desactiva o cambia el rol de un usuario"""
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cliente no encontrado"
        )

    if user.id == admin.id and (data.is_active is False or data.role == UserRole.CUSTOMER.value):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No puedes desactivar ni quitar permisos a tu propia cuenta"
        )

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(user, field, value)

    await db.commit()
    await db.refresh(user)
    return user.to_dict()
