import logging
from typing import List

from fastapi import APIRouter, HTTPException, Path, Request, Response, status
from fastapi.responses import PlainTextResponse

from catalogue.config import settings

from .dependencies import ProductAdminServiceDep, ProductServiceDep
from .exceptions import (
    ImageNotFoundException, ProductNotFoundException, ProductReadException, UploadLimitException,
)
from .forms import build_create_command, build_update_command, read_admin_payload
from .models import ProductRead, ProductReadWithImages

logger = logging.getLogger(__name__)

# --- Router Definition ---
router = APIRouter(tags=["Products"])

# AUCUNE AUTH sur l'admin: la protection est à la charge du déploiement
admin_router = APIRouter(prefix="/admin", tags=["Admin"])


# --- Helpers for Error Handling ---
def handle_product_read_errors(e: Exception):
    if isinstance(e, ProductNotFoundException):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not_found")
    if not isinstance(e, ProductReadException):
        logger.error(f"[Product API] Unexpected error: {e}", exc_info=True)
    # Le détail reste dans les logs pour les lectures
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="database_error")


def handle_admin_errors(e: Exception):
    if isinstance(e, UploadLimitException):
        raise HTTPException(status_code=e.status_code, detail=e.code)
    logger.warning(f"[Admin API] Request rejected: {e}")
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e) or "bad_request")


# --- Public Endpoints ---

@router.get("/products", response_model=List[ProductRead])
async def list_products(service: ProductServiceDep):
    logger.info("API list_products")
    try:
        return await service.list_products()
    except Exception as e:
        handle_product_read_errors(e)


@router.get("/products-all", response_model=List[ProductRead])
async def list_products_cached(response: Response, service: ProductServiceDep):
    """Même contenu que /products, avec une directive de cache pour le CDN du site."""
    logger.info("API list_products_cached")
    try:
        products = await service.list_products()
    except Exception as e:
        handle_product_read_errors(e)
    response.headers["Cache-Control"] = settings.PRODUCTS_CACHE_CONTROL
    return products


@router.get("/products/{slug}", response_model=ProductReadWithImages)
async def get_product(service: ProductServiceDep, slug: str = Path(...)):
    logger.info(f"API get_product: slug={slug}")
    try:
        return await service.get_product_by_slug(slug)
    except Exception as e:
        handle_product_read_errors(e)


@router.get("/images/{image_id}")
async def get_image(service: ProductServiceDep, image_id: int = Path(...)):
    """Octets bruts de l'image; immuables une fois créés, d'où le cache public."""
    try:
        image = await service.get_image(image_id)
    except ImageNotFoundException:
        return PlainTextResponse("Not found", status_code=status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.error(f"[Product API] Error serving image {image_id}: {e}")
        return PlainTextResponse("server_error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(
        content=image.content,
        media_type=image.mime_type,
        headers={"Cache-Control": settings.IMAGES_CACHE_CONTROL},
    )


# --- Admin Endpoints ---

@admin_router.post("/products")
async def create_product(request: Request, service: ProductAdminServiceDep):
    """Crée un produit; champs "image" (1) et "images" (N) stockés en base."""
    try:
        fields, uploads = await read_admin_payload(request)
        product_data = build_create_command(fields)
        product_id = await service.create_product(product_data, uploads)
        return {"ok": True, "id": product_id}
    except Exception as e:
        handle_admin_errors(e)


@admin_router.put("/products/{product_id}")
async def update_product(request: Request, service: ProductAdminServiceDep, product_id: int = Path(...)):
    """Mise à jour partielle; un nouvel upload devient l'image principale."""
    try:
        fields, uploads = await read_admin_payload(request)
        product_data = build_update_command(fields)
        await service.update_product(product_id, product_data, uploads)
        return {"ok": True}
    except Exception as e:
        handle_admin_errors(e)


@admin_router.delete("/products/{product_id}")
async def delete_product(service: ProductAdminServiceDep, product_id: int = Path(...)):
    try:
        await service.delete_product(product_id)
        return {"ok": True}
    except Exception as e:
        handle_admin_errors(e)
