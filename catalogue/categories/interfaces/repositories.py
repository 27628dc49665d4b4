from abc import ABC, abstractmethod
from typing import List

from catalogue.categories.models import CategoryRead


class AbstractCategoryRepository(ABC):
    """Interface abstraite pour le repository des catégories."""

    @abstractmethod
    async def list(self) -> List[CategoryRead]:
        """Liste toutes les catégories triées par nom."""
        pass
