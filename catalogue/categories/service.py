import logging
from typing import List

from .exceptions import CategoryServiceException
from .interfaces.repositories import AbstractCategoryRepository
from .models import CategoryRead

logger = logging.getLogger(__name__)


class CategoryService:
    """Service applicatif de lecture des catégories."""

    def __init__(self, repository: AbstractCategoryRepository):
        self.repository = repository

    async def list_categories(self) -> List[CategoryRead]:
        """Liste les catégories triées par nom croissant."""
        logger.debug("[CategoryService] List Categories")
        try:
            return await self.repository.list()
        except Exception as e:
            logger.error(f"[CategoryService] Error listing categories via repository: {e}", exc_info=True)
            raise CategoryServiceException(f"Erreur interne lors de la récupération des catégories: {e}") from e
