"""
TREE Uniformes - Content API
Secciones por industria y mensajes de contacto
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from storefront.database import get_db
from storefront.models import IndustrySection, ContactMessage, User
from storefront.schemas import IndustrySectionCreate, IndustrySectionUpdate, ContactMessageCreate
from storefront.core import limiter, settings
from storefront.api.auth import get_current_admin

logger = logging.getLogger(__name__)

industry_router = APIRouter(prefix="/industry-sections", tags=["Content"])
contact_router = APIRouter(prefix="/contact-messages", tags=["Content"])


# ============================================
# SECCIONES POR INDUSTRIA
# ============================================

async def _get_section_or_404(db: AsyncSession, section_id: int) -> IndustrySection:
    section = await db.get(IndustrySection, section_id)
    if not section:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Seccion no encontrada"
        )
    return section


@industry_router.get("")
async def list_industry_sections(active_only: bool = True, db: AsyncSession = Depends(get_db)):
    query = select(IndustrySection)
    if active_only:
        query = query.where(IndustrySection.is_active == True)
    result = await db.execute(query.order_by(IndustrySection.sort_order, IndustrySection.id))
    return [s.to_dict() for s in result.scalars().all()]


@industry_router.get("/{section_id}")
async def get_industry_section(section_id: int, db: AsyncSession = Depends(get_db)):
    section = await _get_section_or_404(db, section_id)
    return section.to_dict()


@industry_router.post("", status_code=status.HTTP_201_CREATED)
async def create_industry_section(
    data: IndustrySectionCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    section = IndustrySection(**data.model_dump())
    db.add(section)
    await db.commit()
    await db.refresh(section)
    return section.to_dict()


@industry_router.put("/{section_id}")
async def update_industry_section(
    section_id: int,
    data: IndustrySectionUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    section = await _get_section_or_404(db, section_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(section, field, value)
    await db.commit()
    await db.refresh(section)
    return section.to_dict()


@industry_router.delete("/{section_id}")
async def delete_industry_section(
    section_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    section = await _get_section_or_404(db, section_id)
    await db.delete(section)
    await db.commit()
    return {"message": "Seccion eliminada"}


# ============================================
# MENSAJES DE CONTACTO
# ============================================

@contact_router.post("", status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.PUBLIC_FORM_RATE_LIMIT)
async def create_contact_message(
    request: Request,
    data: ContactMessageCreate,
    db: AsyncSession = Depends(get_db)
):
    """Formulario publico de contacto"""
    message = ContactMessage(**data.model_dump())
    db.add(message)
    await db.commit()
    await db.refresh(message)
    logger.info(f"Mensaje de contacto recibido de {message.email}")
    return {
        "message": "Mensaje enviado exitosamente",
        "contact_message": message.to_dict(),
    }


@contact_router.get("")
async def list_contact_messages(
    unread_only: bool = False,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    query = select(ContactMessage)
    if unread_only:
        query = query.where(ContactMessage.is_read == False)
    result = await db.execute(query.order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc()))
    return [m.to_dict() for m in result.scalars().all()]


@contact_router.get("/unread-count")
async def unread_count(
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    result = await db.execute(
        select(func.count(ContactMessage.id)).where(ContactMessage.is_read == False)
    )
    return {"count": result.scalar() or 0}


async def _get_message_or_404(db: AsyncSession, message_id: int) -> ContactMessage:
    message = await db.get(ContactMessage, message_id)
    if not message:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Mensaje no encontrado"
        )
    return message


@contact_router.patch("/{message_id}/read")
async def mark_as_read(
    message_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    message = await _get_message_or_404(db, message_id)
    if not message.is_read:
        message.is_read = True
        await db.commit()
        await db.refresh(message)
    return message.to_dict()


@contact_router.delete("/{message_id}")
async def delete_contact_message(
    message_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    message = await _get_message_or_404(db, message_id)
    await db.delete(message)
    await db.commit()
    return {"message": "Mensaje eliminado"}
