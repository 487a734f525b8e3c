"""
TREE Uniformes - Uploads API
Subida de imagenes en dos pasos: se pide una URL y se envia el archivo
"""
import logging
import os
import re
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status

from storefront.models import User
from storefront.core import settings
from storefront.api.auth import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/objects", tags=["Uploads"])

OBJECT_ID_PATTERN = re.compile(r'^[0-9a-f]{32}(\.[a-z0-9]{1,5})?$')
ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "gif"}


def uploads_path() -> str:
    """Directorio de uploads: UPLOADS_DIR, /app/uploads en contenedor o ./uploads"""
    if settings.UPLOADS_DIR:
        return settings.UPLOADS_DIR
    if os.path.exists("/app/uploads"):
        return "/app/uploads"
    return os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), "uploads")


@router.post("/upload")
async def request_upload_url(
    extension: Optional[str] = None,
    admin: User = Depends(get_current_admin)
):
    """Genera el destino para un archivo nuevo"""
    object_id = uuid.uuid4().hex
    if extension:
        extension = extension.lower().lstrip(".")
        if extension not in ALLOWED_EXTENSIONS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Extension no permitida: {extension}"
            )
        object_id = f"{object_id}.{extension}"

    return {
        "object_id": object_id,
        "upload_url": f"{settings.APP_URL}/api/objects/upload/{object_id}",
        "object_path": f"/uploads/{object_id}",
    }


@router.put("/upload/{object_id}")
async def upload_object(
    object_id: str,
    request: Request,
    admin: User = Depends(get_current_admin)
):
    """Guarda el cuerpo crudo de la peticion bajo el directorio de uploads"""
    _, dot, extension = object_id.partition(".")
    if not OBJECT_ID_PATTERN.match(object_id) or (dot and extension not in ALLOWED_EXTENSIONS):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Identificador de archivo invalido"
        )

    body = await request.body()
    if not body:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Archivo vacio"
        )
    if len(body) > settings.MAX_UPLOAD_SIZE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="El archivo excede el tamaño permitido"
        )

    directory = uploads_path()
    os.makedirs(directory, exist_ok=True)
    with open(os.path.join(directory, object_id), "wb") as f:
        f.write(body)

    logger.info(f"Archivo subido: {object_id} ({len(body)} bytes)")
    return {"object_path": f"/uploads/{object_id}", "size": len(body)}
