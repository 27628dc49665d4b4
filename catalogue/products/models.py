from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import Column, DateTime, LargeBinary
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProductEtat(str, Enum):
    """Etat commercial d'un produit."""
    NEUF = "neuf"
    OCCASION = "occasion"
    RECONDITIONNE = "reconditionne"


# --- Modèle Product SQLModel ---

class ProductBase(SQLModel):
    name: str = Field(max_length=255)
    slug: str = Field(index=True, unique=True, max_length=255)
    description: Optional[str] = Field(default=None)
    price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(default=None)
    image_url: Optional[str] = Field(default=None)
    is_available: bool = Field(default=False)
    etat: Optional[str] = Field(default=None, max_length=32)
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id", index=True)
    # Référence faible vers product_images.id (pas de FK: dépendance circulaire)
    main_image_id: Optional[int] = Field(default=None)


class Product(ProductBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    __tablename__ = "products"


class ProductImage(SQLModel, table=True):
    """Image binaire stockée en base, rattachée à un seul produit."""
    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    mime_type: str = Field(max_length=100)
    content: bytes = Field(sa_column=Column("bytes", LargeBinary, nullable=False))
    size_bytes: int

    __tablename__ = "product_images"


# --- Schémas API (lecture) ---

class ProductRead(ProductBase):
    id: int
    created_at: datetime
    updated_at: datetime
    category_name: Optional[str] = None
    category_slug: Optional[str] = None


class ProductImageInfo(SQLModel):
    id: int
    url: str
    mime_type: str
    size_bytes: int


class ProductReadWithImages(ProductRead):
    images: List[ProductImageInfo] = []


class ProductImageData(SQLModel):
    mime_type: str
    content: bytes


# --- Commandes d'écriture (admin) ---
# Les valeurs sont déjà normalisées (chaînes vides -> None, is_available -> bool)
# par catalogue.products.forms avant validation.

class ProductCreate(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    stock: Optional[int] = None
    image_url: Optional[str] = None
    is_available: bool = False
    etat: Optional[ProductEtat] = None
    category_id: Optional[int] = None


class ProductUpdate(SQLModel):
    """Champ à None = valeur stockée conservée."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    stock: Optional[int] = None
    image_url: Optional[str] = None
    is_available: Optional[bool] = None
    etat: Optional[ProductEtat] = None
    category_id: Optional[int] = None


@dataclass
class UploadedImage:
    """Fichier reçu par l'admin, déjà lu en mémoire et contrôlé en taille."""
    filename: str
    mime_type: str
    content: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.content)
