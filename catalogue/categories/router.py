import logging
from typing import List

from fastapi import APIRouter, HTTPException, status

from .dependencies import CategoryServiceDep
from .exceptions import CategoryServiceException
from .models import CategoryRead

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Categories"])


def handle_category_service_errors(e: Exception):
    # Le détail est journalisé côté serveur, jamais renvoyé au client
    if not isinstance(e, CategoryServiceException):
        logger.error(f"[Category API] Unexpected error: {e}", exc_info=True)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="database_error")


@router.get("/categories", response_model=List[CategoryRead])
async def list_categories(service: CategoryServiceDep):
    """Liste publique des catégories, triées par nom."""
    logger.info("API list_categories")
    try:
        return await service.list_categories()
    except Exception as e:
        handle_category_service_errors(e)
