import logging
from typing import List

from .exceptions import ImageNotFoundException, ProductNotFoundException, ProductReadException
from .interfaces.repositories import AbstractProductRepository
from .models import ProductImageData, ProductRead, ProductReadWithImages

logger = logging.getLogger(__name__)


class ProductService:
    """Service de lecture du catalogue: listes, fiche produit, images binaires."""

    def __init__(self, product_repo: AbstractProductRepository):
        self.product_repo = product_repo

    async def list_products(self) -> List[ProductRead]:
        """Produits avec leur catégorie, du plus récent au plus ancien."""
        logger.debug("[ProductService] List Products")
        try:
            return await self.product_repo.list_with_category()
        except Exception as e:
            logger.error(f"[ProductService] Error listing products: {e}", exc_info=True)
            raise ProductReadException(str(e)) from e

    async def get_product_by_slug(self, slug: str) -> ProductReadWithImages:
        """
        Fiche produit par slug exact, enrichie des métadonnées d'images.

        Les images sont accessoires: si leur lecture échoue, le produit est
        renvoyé avec une liste vide plutôt qu'une erreur.
        """
        logger.debug(f"[ProductService] Get Product slug: {slug}")
        try:
            product = await self.product_repo.get_by_slug(slug)
        except Exception as e:
            logger.error(f"[ProductService] Error fetching product {slug}: {e}", exc_info=True)
            raise ProductReadException(str(e)) from e
        if product is None:
            raise ProductNotFoundException(slug=slug)

        try:
            images = await self.product_repo.list_images(product.id)
        except Exception as e:
            logger.error(f"[ProductService] Error fetching images for product {product.id}: {e}", exc_info=True)
            images = []
        return ProductReadWithImages(**product.model_dump(), images=images)

    async def get_image(self, image_id: int) -> ProductImageData:
        logger.debug(f"[ProductService] Get Image ID: {image_id}")
        try:
            image = await self.product_repo.get_image(image_id)
        except Exception as e:
            logger.error(f"[ProductService] Error fetching image {image_id}: {e}", exc_info=True)
            raise ProductReadException(str(e)) from e
        if image is None:
            raise ImageNotFoundException(image_id)
        return image
