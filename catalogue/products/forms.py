"""
Conversion du corps des requêtes admin en commandes typées.

Le corps arrive sous forme de mapping non typé (multipart, urlencoded ou
JSON). Il est normalisé ici, puis validé en ProductCreate / ProductUpdate:
le service d'écriture ne reçoit que des valeurs déjà converties.
"""
import logging
from typing import Any, Dict, List, Mapping, Tuple

from fastapi import Request, status
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from catalogue.config import settings
from catalogue.utils import coerce_is_available

from .exceptions import ProductValidationException, UploadLimitException
from .models import ProductCreate, ProductUpdate, UploadedImage

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = (
    "name", "description", "price", "stock", "image_url",
    "is_available", "etat", "category_id",
)

SINGLE_IMAGE_FIELD = "image"
MULTI_IMAGE_FIELD = "images"

# 413 Content Too Large
FILE_TOO_LARGE_STATUS = 413


def normalize_fields(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Chaînes nettoyées, chaînes vides -> None, is_available -> bool|None. Le slug client est ignoré."""
    fields: Dict[str, Any] = {}
    for key in PRODUCT_FIELDS:
        value = raw.get(key)
        if isinstance(value, UploadFile):
            value = None
        if key == "is_available":
            fields[key] = coerce_is_available(value)
            continue
        if isinstance(value, str):
            value = value.strip() or None
        fields[key] = value
    return fields


def _validation_message(e: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
    )


def build_create_command(raw: Mapping[str, Any]) -> ProductCreate:
    fields = normalize_fields(raw)
    if fields["is_available"] is None:
        fields["is_available"] = False
    try:
        return ProductCreate.model_validate(fields)
    except ValidationError as e:
        raise ProductValidationException(_validation_message(e)) from e


def build_update_command(raw: Mapping[str, Any]) -> ProductUpdate:
    try:
        return ProductUpdate.model_validate(normalize_fields(raw))
    except ValidationError as e:
        raise ProductValidationException(_validation_message(e)) from e


def _too_large(upload: UploadFile, max_bytes: int) -> UploadLimitException:
    logger.warning(f"[Admin upload] File '{upload.filename}' exceeds {max_bytes} bytes")
    return UploadLimitException(
        "file_too_large", FILE_TOO_LARGE_STATUS,
        f"Le fichier '{upload.filename}' dépasse la taille maximale de {max_bytes} octets.",
    )


async def _read_upload(upload: UploadFile, max_bytes: int) -> UploadedImage:
    # Taille connue après parsing multipart: rejet sans lecture en mémoire
    if upload.size is not None and upload.size > max_bytes:
        raise _too_large(upload, max_bytes)
    content = await upload.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise _too_large(upload, max_bytes)
    return UploadedImage(
        filename=upload.filename or "",
        mime_type=upload.content_type or "application/octet-stream",
        content=content,
    )


def _files(values: List[Any]) -> List[UploadFile]:
    # Un input file vide envoie une partie sans nom de fichier ni contenu
    return [v for v in values if isinstance(v, UploadFile) and (v.filename or v.size)]


async def read_admin_payload(request: Request) -> Tuple[Dict[str, Any], List[UploadedImage]]:
    """
    Lit le corps d'une requête admin: (champs bruts, images).

    Les limites d'upload (1 fichier "image", MAX_IMAGE_FILES fichiers
    "images", MAX_UPLOAD_BYTES par fichier) sont contrôlées ici, avant
    toute écriture en base.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        body = await request.json()
        if not isinstance(body, dict):
            raise ProductValidationException("Le corps JSON doit être un objet.")
        return body, []

    async with request.form() as form:
        raw = {key: form.get(key) for key in form.keys()}
        single = _files(form.getlist(SINGLE_IMAGE_FIELD))
        multiple = _files(form.getlist(MULTI_IMAGE_FIELD))
        if len(single) > 1 or len(multiple) > settings.MAX_IMAGE_FILES:
            raise UploadLimitException(
                "too_many_files", status.HTTP_400_BAD_REQUEST,
                f"Trop de fichiers: 1 '{SINGLE_IMAGE_FIELD}' et {settings.MAX_IMAGE_FILES} '{MULTI_IMAGE_FIELD}' maximum.",
            )
        uploads = []
        for upload in single + multiple:
            uploads.append(await _read_upload(upload, settings.MAX_UPLOAD_BYTES))
    return raw, uploads
