import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from catalogue.categories.models import Category
from catalogue.database import Database
from catalogue.products.interfaces.repositories import AbstractProductRepository, AbstractProductWriteRepository
from catalogue.products.models import (
    Product, ProductImage, ProductImageData, ProductImageInfo, ProductRead, UploadedImage, utcnow,
)

logger = logging.getLogger(__name__)


def image_url(image_id: int) -> str:
    return f"/images/{image_id}"


def _product_with_category():
    """SELECT p.*, c.name AS category_name, c.slug AS category_slug FROM products p LEFT JOIN categories c"""
    return (
        select(
            *Product.__table__.columns,
            Category.name.label("category_name"),
            Category.slug.label("category_slug"),
        )
        .select_from(Product)
        .outerjoin(Category, Category.id == Product.category_id)
    )


class SQLAlchemyProductRepository(AbstractProductRepository):
    """Lectures du catalogue, chacune sur une connexion gérée par Database.query."""

    def __init__(self, database: Database):
        self.database = database

    async def list_with_category(self) -> List[ProductRead]:
        logger.debug("[Repo] Listing products with category")
        stmt = _product_with_category().order_by(Product.created_at.desc(), Product.id.desc())
        rows = await self.database.query(stmt)
        return [ProductRead.model_validate(row) for row in rows]

    async def get_by_slug(self, slug: str) -> Optional[ProductRead]:
        logger.debug(f"[Repo] Getting product by slug: {slug}")
        rows = await self.database.query(_product_with_category().where(Product.slug == slug))
        if not rows:
            logger.warning(f"[Repo] Product not found by slug: {slug}")
            return None
        return ProductRead.model_validate(rows[0])

    async def list_images(self, product_id: int) -> List[ProductImageInfo]:
        stmt = (
            select(ProductImage.id, ProductImage.mime_type, ProductImage.size_bytes)
            .where(ProductImage.product_id == product_id)
            .order_by(ProductImage.id.asc())
        )
        rows = await self.database.query(stmt)
        return [ProductImageInfo(url=image_url(row["id"]), **row) for row in rows]

    async def get_image(self, image_id: int) -> Optional[ProductImageData]:
        stmt = (
            select(ProductImage.mime_type, ProductImage.content.label("content"))
            .where(ProductImage.id == image_id)
        )
        rows = await self.database.query(stmt)
        if not rows:
            logger.warning(f"[Repo] Image not found by ID: {image_id}")
            return None
        return ProductImageData(mime_type=rows[0]["mime_type"], content=bytes(rows[0]["content"]))


class SQLAlchemyProductWriteRepository(AbstractProductWriteRepository):
    """Ecritures produits/images sur la session d'une transaction ouverte par l'appelant."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def unique_slug(self, base_slug: str, exclude_id: Optional[int] = None) -> str:
        """Premier slug libre parmi base, base-2, base-3..."""
        stmt = select(Product.slug).where(
            or_(Product.slug == base_slug, Product.slug.like(f"{base_slug}-%"))
        )
        if exclude_id is not None:
            stmt = stmt.where(Product.id != exclude_id)
        taken = set((await self.db.execute(stmt)).scalars().all())
        if base_slug not in taken:
            return base_slug
        suffix = 2
        while f"{base_slug}-{suffix}" in taken:
            suffix += 1
        logger.info(f"[Repo] Slug '{base_slug}' already used, using '{base_slug}-{suffix}'")
        return f"{base_slug}-{suffix}"

    async def insert_product(self, values: Dict[str, Any]) -> int:
        logger.debug(f"[Repo] Creating product: {values.get('name')}")
        product = Product(**values)
        self.db.add(product)
        await self.db.flush()
        logger.info(f"[Repo] Product '{product.name}' created with ID: {product.id}")
        return product.id

    async def update_product(self, product_id: int, values: Dict[str, Any]) -> bool:
        logger.debug(f"[Repo] Updating product ID: {product_id} fields={sorted(values)}")
        result = await self.db.execute(
            update(Product).where(Product.id == product_id).values(**values)
        )
        return result.rowcount > 0

    async def insert_image(self, product_id: int, image: UploadedImage) -> int:
        row = ProductImage(
            product_id=product_id,
            mime_type=image.mime_type,
            content=image.content,
            size_bytes=image.size_bytes,
        )
        self.db.add(row)
        await self.db.flush()
        logger.debug(f"[Repo] Image ID {row.id} stored for product {product_id} ({image.size_bytes} bytes)")
        return row.id

    async def set_main_image(self, product_id: int, image_id: int) -> None:
        await self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(main_image_id=image_id, image_url=image_url(image_id), updated_at=utcnow())
        )

    async def delete_product(self, product_id: int) -> int:
        logger.debug(f"[Repo] Deleting product ID: {product_id} and its images")
        await self.db.execute(delete(ProductImage).where(ProductImage.product_id == product_id))
        result = await self.db.execute(delete(Product).where(Product.id == product_id))
        return result.rowcount
