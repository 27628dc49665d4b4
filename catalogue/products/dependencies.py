import logging
from typing import Annotated

from fastapi import Depends

from catalogue.database import Database, get_database

from .admin_service import ProductAdminService
from .interfaces.repositories import AbstractProductRepository
from .repositories import SQLAlchemyProductRepository
from .service import ProductService

logger = logging.getLogger(__name__)

# --- Dependency Getters --- #

DatabaseDep = Annotated[Database, Depends(get_database)]


def get_product_repository(database: DatabaseDep) -> AbstractProductRepository:
    """Provides an instance of the SQLAlchemyProductRepository."""
    return SQLAlchemyProductRepository(database=database)

ProductRepositoryDep = Annotated[AbstractProductRepository, Depends(get_product_repository)]


def get_product_service(product_repo: ProductRepositoryDep) -> ProductService:
    return ProductService(product_repo=product_repo)

ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]


def get_product_admin_service(database: DatabaseDep) -> ProductAdminService:
    """Le service admin ouvre ses propres transactions: il reçoit Database, pas une session."""
    return ProductAdminService(database=database)

ProductAdminServiceDep = Annotated[ProductAdminService, Depends(get_product_admin_service)]
