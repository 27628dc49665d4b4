from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from catalogue.products.models import ProductImageData, ProductImageInfo, ProductRead, UploadedImage


class AbstractProductRepository(ABC):
    """Interface de lecture du catalogue produits."""

    @abstractmethod
    async def list_with_category(self) -> List[ProductRead]:
        """Produits du plus récent au plus ancien, avec nom/slug de catégorie."""
        pass

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[ProductRead]:
        pass

    @abstractmethod
    async def list_images(self, product_id: int) -> List[ProductImageInfo]:
        """Métadonnées des images d'un produit, par ID croissant."""
        pass

    @abstractmethod
    async def get_image(self, image_id: int) -> Optional[ProductImageData]:
        pass


class AbstractProductWriteRepository(ABC):
    """Interface d'écriture, utilisée à l'intérieur d'une transaction."""

    @abstractmethod
    async def unique_slug(self, base_slug: str, exclude_id: Optional[int] = None) -> str:
        pass

    @abstractmethod
    async def insert_product(self, values: Dict[str, Any]) -> int:
        pass

    @abstractmethod
    async def update_product(self, product_id: int, values: Dict[str, Any]) -> bool:
        """Retourne False si aucune ligne ne correspond."""
        pass

    @abstractmethod
    async def insert_image(self, product_id: int, image: UploadedImage) -> int:
        pass

    @abstractmethod
    async def set_main_image(self, product_id: int, image_id: int) -> None:
        pass

    @abstractmethod
    async def delete_product(self, product_id: int) -> int:
        """Supprime le produit et ses images; retourne le nombre de produits supprimés."""
        pass
