import logging
from typing import List

from fastcrud import FastCRUD

from catalogue.categories.interfaces.repositories import AbstractCategoryRepository
from catalogue.categories.models import Category, CategoryRead
from catalogue.database import Database

logger = logging.getLogger(__name__)

# Borne haute de sécurité pour la liste complète des catégories
MAX_CATEGORIES = 10_000


class SQLAlchemyCategoryRepository(AbstractCategoryRepository):
    """Implémentation SQLAlchemy du repository des catégories avec FastCRUD."""

    def __init__(self, database: Database):
        self.database = database
        self.crud = FastCRUD(Category)

    async def list(self) -> List[CategoryRead]:
        logger.debug("[CategoryRepository] Listing categories sorted by name")
        async with self.database.session() as session:
            result = await self.crud.get_multi(
                db=session,
                offset=0,
                limit=MAX_CATEGORIES,
                schema_to_select=CategoryRead,
                sort_columns="name",
                sort_orders="asc",
            )
        return [CategoryRead.model_validate(row) for row in result.get('data', [])]
