"""
TREE Uniformes - Quotes API
Cotizaciones del admin y solicitudes de presupuesto desde la tienda
"""
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional, List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from storefront.database import get_db
from storefront.models import Quote, QuoteItem, QuoteStatus, Product, User, UserRole
from storefront.schemas import QuoteCreate, QuoteUpdate, QuoteRequest
from storefront.core import email_service, limiter, settings
from storefront.core.numbering import generate_quote_number, bump_number
from storefront.services.pricing import line_total, quantize, tax_for
from storefront.services.lifecycle import check_quote_transition, InvalidTransition
from storefront.utils.document_pdf import generate_quote_pdf
from storefront.api.auth import get_current_user, get_current_admin, get_optional_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotes", tags=["Quotes"])


async def unique_quote_number(db: AsyncSession) -> str:
    number = generate_quote_number()
    while True:
        result = await db.execute(select(Quote.id).where(Quote.quote_number == number))
        if result.first() is None:
            return number
        number = bump_number(number)


async def load_quote(db: AsyncSession, quote_id: int) -> Optional[Quote]:
    result = await db.execute(
        select(Quote)
        .where(Quote.id == quote_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_quote_for(db: AsyncSession, quote_id: int, user: User) -> Quote:
    quote = await load_quote(db, quote_id)
    if not quote:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cotizacion no encontrada"
        )
    if not user.is_admin and quote.customer_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No tienes acceso a esta cotizacion"
        )
    return quote


async def commit_new_quote(db: AsyncSession):
    """Un folio tomado en paralelo (mismo milisegundo) se reporta como 409"""
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No se pudo asignar folio a la cotizacion, intenta de nuevo"
        )


def default_valid_until() -> datetime:
    return datetime.utcnow() + timedelta(days=settings.QUOTE_VALIDITY_DAYS)


def _subtotal(items: List[QuoteItem]) -> Decimal:
    return quantize(sum((item.total_price for item in items), Decimal("0")))


async def _customer_or_guest(db: AsyncSession, info) -> Optional[User]:
    """
    Cliente sin cuenta para una solicitud anonima.

    Solo se reutiliza un cliente previo sin contraseña. Si el email pertenece
    a una cuenta registrada (o a un admin) la cotizacion queda sin cliente
    ligado y solo guarda los datos de contacto.
    """
    email = info.email.lower()
    result = await db.execute(select(User).where(func.lower(User.email) == email))
    customer = result.scalar_one_or_none()
    if customer:
        if customer.hashed_password is None and customer.role == UserRole.CUSTOMER.value:
            return customer
        logger.warning(f"Solicitud anonima con email de cuenta registrada: {email}")
        return None

    customer = User(
        email=email,
        first_name=info.first_name,
        last_name=info.last_name,
        role=UserRole.CUSTOMER.value,
        phone=info.phone,
        company=info.company,
        address=info.address,
        city=info.city,
        state=info.state,
        zip_code=info.zip_code,
        is_active=True
    )
    db.add(customer)
    await db.flush()
    logger.info(f"Cliente sin cuenta creado desde solicitud de cotizacion: {email}")
    return customer


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_quote(
    data: QuoteCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    """Cotizacion capturada por el admin con precios explicitos"""
    customer = None
    if data.customer_id:
        customer = await db.get(User, data.customer_id)
        if not customer:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cliente no encontrado"
            )

    items = []
    for line in data.items:
        product = await db.get(Product, line.product_id) if line.product_id else None
        if line.product_id and not product:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Producto {line.product_id} no encontrado"
            )

        unit_price = line.unit_price if line.unit_price is not None else (product.price if product else None)
        name = line.product_name or (product.name if product else None)
        if unit_price is None or not name:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cada partida necesita producto o nombre y precio"
            )

        items.append(QuoteItem(
            product_id=product.id if product else None,
            product_name=name,
            sku=line.sku or (product.sku if product else None),
            size=line.size,
            color=line.color,
            quantity=line.quantity,
            unit_price=quantize(unit_price),
            total_price=line_total(unit_price, line.quantity),
            notes=line.notes
        ))

    subtotal = _subtotal(items)
    tax = quantize(data.tax) if data.tax is not None else tax_for(subtotal)

    quote = Quote(
        quote_number=await unique_quote_number(db),
        customer_id=customer.id if customer else None,
        customer_name=data.customer_name or (customer.full_name if customer else None),
        customer_email=data.customer_email or (customer.email if customer else None),
        customer_company=data.customer_company or (customer.company if customer else None),
        subtotal=subtotal,
        tax=tax,
        total=quantize(subtotal + tax),
        valid_until=data.valid_until or default_valid_until(),
        urgency=data.urgency,
        notes=data.notes,
        status=data.status,
        items=items
    )
    db.add(quote)
    await commit_new_quote(db)

    quote = await load_quote(db, quote.id)
    quote_data = quote.to_dict()
    logger.info(f"Cotizacion creada: {quote.quote_number} total {quote_data['total']}")

    if quote.status == QuoteStatus.SENT.value:
        background_tasks.add_task(email_service.send_quote_confirmation, quote_data)
    return quote_data


@router.post("/request", status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.PUBLIC_FORM_RATE_LIMIT)
async def request_quote(
    request: Request,
    data: QuoteRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user)
):
    """
    Solicitud de presupuesto desde la tienda.

    Los precios salen del catalogo; productos inexistentes se omiten. Sin
    sesion, customer_info identifica (o crea) al cliente sin cuenta. El monto
    es un estimado antes de IVA.
    """
    info = data.customer_info
    if user:
        customer = user
    elif info:
        customer = await _customer_or_guest(db, info)
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Se requieren los datos de contacto del cliente"
        )

    items = []
    for line in data.products:
        product = await db.get(Product, line.product_id)
        if not product:
            logger.warning(f"Producto {line.product_id} omitido en solicitud de cotizacion")
            continue
        items.append(QuoteItem(
            product_id=product.id,
            product_name=product.name,
            sku=product.sku,
            size=line.size or None,
            color=line.color or None,
            quantity=line.quantity,
            unit_price=quantize(product.price),
            total_price=line_total(product.price, line.quantity),
            notes=line.notes
        ))

    if not items:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Ninguno de los productos solicitados existe"
        )

    subtotal = _subtotal(items)
    quote = Quote(
        quote_number=await unique_quote_number(db),
        customer_id=customer.id if customer else None,
        customer_name=(customer.full_name if customer else f"{info.first_name} {info.last_name}") or None,
        customer_email=customer.email if customer else info.email.lower(),
        customer_company=customer.company if customer else info.company,
        subtotal=subtotal,
        tax=quantize(0),
        total=subtotal,
        valid_until=default_valid_until(),
        urgency=data.urgency,
        preferred_delivery_date=data.preferred_delivery_date,
        notes=data.notes,
        status=QuoteStatus.DRAFT.value,
        items=items
    )
    db.add(quote)
    await commit_new_quote(db)

    quote = await load_quote(db, quote.id)
    quote_data = quote.to_dict()
    logger.info(f"Solicitud de cotizacion {quote.quote_number} de {quote.customer_email}")

    background_tasks.add_task(email_service.notify_quote_created, quote_data)
    return {
        "message": "Solicitud de presupuesto enviada exitosamente",
        "quote": quote_data,
    }


@router.get("")
async def list_quotes(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = 50,
    offset: int = 0,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Admin ve todas; el cliente solo las suyas"""
    query = select(Quote)
    if not user.is_admin:
        query = query.where(Quote.customer_id == user.id)
    if status_filter:
        query = query.where(Quote.status == status_filter)

    result = await db.execute(
        query.order_by(Quote.created_at.desc(), Quote.id.desc()).offset(offset).limit(limit)
    )
    return [q.to_dict() for q in result.scalars().all()]


@router.get("/{quote_id}")
async def get_quote(
    quote_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    quote = await get_quote_for(db, quote_id, user)
    return quote.to_dict()


@router.put("/{quote_id}")
async def update_quote(
    quote_id: int,
    data: QuoteUpdate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    """Status (maquina de estados), notas, vigencia e IVA"""
    quote = await load_quote(db, quote_id)
    if not quote:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cotizacion no encontrada"
        )

    previous = quote.status
    changed = False
    if data.status is not None:
        try:
            changed = check_quote_transition(previous, data.status)
        except InvalidTransition as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
        quote.status = data.status

    update_data = data.model_dump(exclude_unset=True, exclude={"status"})
    if "notes" in update_data:
        quote.notes = data.notes
    if data.valid_until is not None:
        quote.valid_until = data.valid_until
    if data.tax is not None:
        quote.tax = quantize(data.tax)
        quote.total = quantize(quote.subtotal + quote.tax)

    await db.commit()
    quote = await load_quote(db, quote_id)
    quote_data = quote.to_dict()

    if changed:
        logger.info(f"Cotizacion {quote.quote_number}: {previous} -> {quote.status}")
        if quote.status == QuoteStatus.SENT.value:
            background_tasks.add_task(email_service.send_quote_confirmation, quote_data)
    return quote_data


@router.get("/{quote_id}/pdf")
async def get_quote_pdf(
    quote_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    quote = await get_quote_for(db, quote_id, user)
    pdf_bytes = await generate_quote_pdf(quote.to_dict())
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="cotizacion-{quote.quote_number}.pdf"'}
    )
