from typing import Optional

from sqlmodel import SQLModel, Field

# --- Modèle de base pour les catégories ---
class CategoryBase(SQLModel):
    """Modèle de base pour les catégories."""
    name: str = Field(index=True, max_length=100)
    slug: str = Field(index=True, unique=True, max_length=120)

# --- Modèle Category (Table) ---
# Les catégories sont gérées hors de cette API (lecture seule ici).
class Category(CategoryBase, table=True):
    """Modèle de table pour les catégories."""
    id: Optional[int] = Field(default=None, primary_key=True)

    __tablename__ = "categories"

# --- Schémas API ---
class CategoryRead(CategoryBase):
    """Schéma pour la lecture d'une catégorie."""
    id: int
