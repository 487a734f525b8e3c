"""
TREE Uniformes - Quote Expiry
Vence automaticamente las cotizaciones abiertas cuya validez ya paso.

Corre en background (task asyncio iniciada en el lifespan) y:
1. Busca cotizaciones draft/sent con valid_until en el pasado
2. Las marca como expired
"""
import asyncio
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import settings
from storefront.database import AsyncSessionLocal
from storefront.models import Quote, QuoteStatus, OPEN_QUOTE_STATUSES

logger = logging.getLogger(__name__)


async def expire_overdue_quotes(db: AsyncSession, now: Optional[datetime] = None) -> int:
    """Marca como expired las cotizaciones vencidas. Retorna cuantas cambio."""
    now = now or datetime.utcnow()
    result = await db.execute(
        select(Quote).where(
            Quote.status.in_(OPEN_QUOTE_STATUSES),
            Quote.valid_until.is_not(None),
            Quote.valid_until < now,
        )
    )
    quotes = result.scalars().all()

    for quote in quotes:
        quote.status = QuoteStatus.EXPIRED.value
        logger.info(f"[QUOTE-EXPIRY] Cotizacion {quote.quote_number} vencida ({quote.valid_until.isoformat()})")

    if quotes:
        await db.commit()
    return len(quotes)


async def run_sweeper(interval_seconds: Optional[int] = None):
    """
    Loop principal del vencimiento de cotizaciones.
    Se ejecuta cada QUOTE_EXPIRY_SWEEP_INTERVAL_SECONDS.
    """
    interval = interval_seconds or settings.QUOTE_EXPIRY_SWEEP_INTERVAL_SECONDS
    logger.info(f"[QUOTE-EXPIRY] Servicio iniciado (cada {interval}s)")

    while True:
        try:
            async with AsyncSessionLocal() as db:
                expired = await expire_overdue_quotes(db)
                if expired:
                    logger.info(f"[QUOTE-EXPIRY] {expired} cotizaciones marcadas como vencidas")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception(f"[QUOTE-EXPIRY] Error en el loop: {e}")

        await asyncio.sleep(interval)
