import logging
from typing import Any, Callable, Dict, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from catalogue.database import Database
from catalogue.utils import slugify

from .exceptions import (
    ProductCreationFailedException, ProductDeletionFailedException,
    ProductNotFoundException, ProductUpdateFailedException,
)
from .interfaces.repositories import AbstractProductWriteRepository
from .models import ProductCreate, ProductEtat, ProductUpdate, UploadedImage, utcnow
from .repositories import SQLAlchemyProductWriteRepository

logger = logging.getLogger(__name__)

WriteRepositoryFactory = Callable[[AsyncSession], AbstractProductWriteRepository]


def _column_values(data: Dict[str, Any]) -> Dict[str, Any]:
    # L'enum etat est stocké sous sa valeur texte
    values = dict(data)
    if isinstance(values.get("etat"), ProductEtat):
        values["etat"] = values["etat"].value
    return values


class ProductAdminService:
    """
    Ecritures admin sur les produits.

    Chaque opération ouvre sa propre transaction via Database.transaction():
    toute erreur annule l'ensemble (produit et images), rien de partiel ne
    subsiste en base.
    """

    def __init__(
        self,
        database: Database,
        repository_factory: WriteRepositoryFactory = SQLAlchemyProductWriteRepository,
    ):
        self.database = database
        self.repository_factory = repository_factory

    async def _attach_images(
        self, repo: AbstractProductWriteRepository, product_id: int, uploads: Sequence[UploadedImage]
    ) -> Optional[int]:
        """Insère les images dans l'ordre reçu; la première devient l'image principale."""
        main_image_id = None
        for upload in uploads:
            image_id = await repo.insert_image(product_id, upload)
            if main_image_id is None:
                main_image_id = image_id
        if main_image_id is not None:
            await repo.set_main_image(product_id, main_image_id)
        return main_image_id

    async def create_product(self, product_data: ProductCreate, uploads: Sequence[UploadedImage] = ()) -> int:
        logger.info(f"[ProductAdminService] Create Product: {product_data.name} ({len(uploads)} image(s))")
        try:
            async with self.database.transaction() as session:
                repo = self.repository_factory(session)
                values = _column_values(product_data.model_dump())
                values["slug"] = await repo.unique_slug(slugify(product_data.name))
                product_id = await repo.insert_product(values)
                await self._attach_images(repo, product_id, uploads)
        except Exception as e:
            logger.error(f"[ProductAdminService] Error creating product {product_data.name}: {e}", exc_info=True)
            raise ProductCreationFailedException(str(e) or "create_error") from e
        logger.info(f"[ProductAdminService] Product ID {product_id} created.")
        return product_id

    async def update_product(
        self, product_id: int, product_data: ProductUpdate, uploads: Sequence[UploadedImage] = ()
    ) -> None:
        logger.info(f"[ProductAdminService] Update Product ID: {product_id} ({len(uploads)} image(s))")
        try:
            async with self.database.transaction() as session:
                repo = self.repository_factory(session)
                # Champ absent (None) = valeur stockée conservée
                values = _column_values(product_data.model_dump(exclude_none=True))
                if "name" in values:
                    values["slug"] = await repo.unique_slug(slugify(values["name"]), exclude_id=product_id)
                values["updated_at"] = utcnow()
                if not await repo.update_product(product_id, values):
                    raise ProductNotFoundException(product_id=product_id)
                await self._attach_images(repo, product_id, uploads)
        except ProductNotFoundException:
            logger.warning(f"[ProductAdminService] Product not found for update: ID {product_id}")
            raise
        except Exception as e:
            logger.error(f"[ProductAdminService] Error updating product {product_id}: {e}", exc_info=True)
            raise ProductUpdateFailedException(str(e) or "update_error") from e
        logger.info(f"[ProductAdminService] Product ID {product_id} updated.")

    async def delete_product(self, product_id: int) -> None:
        """Suppression idempotente: aucun contrôle d'existence, images supprimées avec le produit."""
        logger.info(f"[ProductAdminService] Delete Product ID: {product_id}")
        try:
            async with self.database.transaction() as session:
                deleted = await self.repository_factory(session).delete_product(product_id)
        except Exception as e:
            logger.error(f"[ProductAdminService] Error deleting product {product_id}: {e}", exc_info=True)
            raise ProductDeletionFailedException(str(e) or "delete_error") from e
        if not deleted:
            logger.info(f"[ProductAdminService] Product ID {product_id} did not exist, nothing deleted.")
