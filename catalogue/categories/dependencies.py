import logging
from typing import Annotated

from fastapi import Depends

from catalogue.database import Database, get_database
from catalogue.categories.interfaces.repositories import AbstractCategoryRepository
from catalogue.categories.repositories import SQLAlchemyCategoryRepository
from catalogue.categories.service import CategoryService

logger = logging.getLogger(__name__)

DatabaseDep = Annotated[Database, Depends(get_database)]


def get_category_repository(database: DatabaseDep) -> AbstractCategoryRepository:
    """Fournit une instance du repository de catégories."""
    return SQLAlchemyCategoryRepository(database=database)

CategoryRepositoryDep = Annotated[AbstractCategoryRepository, Depends(get_category_repository)]


def get_category_service(repository: CategoryRepositoryDep) -> CategoryService:
    """Fournit une instance du service de gestion des catégories."""
    return CategoryService(repository=repository)

CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
