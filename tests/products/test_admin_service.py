import asyncio

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from catalogue.database import Database
from catalogue.products.admin_service import ProductAdminService, _column_values
from catalogue.products.exceptions import (
    ProductCreationFailedException, ProductNotFoundException, ProductUpdateFailedException,
)
from catalogue.products.models import Product, ProductCreate, ProductEtat, ProductImage, ProductUpdate, UploadedImage
from catalogue.products.repositories import SQLAlchemyProductWriteRepository

from tests.conftest import JPEG_BYTES, PNG_BYTES, count_rows, fetch_image_ids, fetch_product


class FailingImageRepository(SQLAlchemyProductWriteRepository):
    """Echoue au N-ième insert d'image pour simuler une panne en cours de transaction."""
    fail_on = 2

    def __init__(self, db):
        super().__init__(db)
        self.inserted = 0

    async def insert_image(self, product_id, image):
        self.inserted += 1
        if self.inserted == self.fail_on:
            raise RuntimeError("disk full")
        return await super().insert_image(product_id, image)


def uploads(*contents):
    return [UploadedImage(filename=f"{i}.bin", mime_type="image/png", content=c) for i, c in enumerate(contents)]


@pytest.mark.asyncio
async def test_create_rolls_back_on_image_failure(database):
    service = ProductAdminService(database=database, repository_factory=FailingImageRepository)

    with pytest.raises(ProductCreationFailedException) as exc_info:
        await service.create_product(ProductCreate(name="Erable du Japon"), uploads(PNG_BYTES, JPEG_BYTES))

    assert "disk full" in str(exc_info.value)
    assert await count_rows(database, Product) == 0
    assert await count_rows(database, ProductImage) == 0


@pytest.mark.asyncio
async def test_update_rolls_back_on_image_failure(database, admin_service):
    product_id = await admin_service.create_product(ProductCreate(name="Erable", stock=3))
    service = ProductAdminService(database=database, repository_factory=FailingImageRepository)

    with pytest.raises(ProductUpdateFailedException):
        await service.update_product(product_id, ProductUpdate(stock=0), uploads(PNG_BYTES, JPEG_BYTES))

    product = await fetch_product(database, product_id)
    assert product["stock"] == 3
    assert product["main_image_id"] is None
    assert await fetch_image_ids(database, product_id) == []


@pytest.mark.asyncio
async def test_update_unknown_product_raises_not_found(admin_service):
    with pytest.raises(ProductNotFoundException):
        await admin_service.update_product(31337, ProductUpdate(stock=1))


@pytest.mark.asyncio
async def test_create_stores_first_upload_as_main(database, admin_service):
    product_id = await admin_service.create_product(ProductCreate(name="Lierre"), uploads(JPEG_BYTES, PNG_BYTES))
    image_ids = await fetch_image_ids(database, product_id)
    product = await fetch_product(database, product_id)
    assert product["main_image_id"] == image_ids[0]


@pytest.mark.parametrize("etat, expected", [(ProductEtat.OCCASION, "occasion"), ("neuf", "neuf"), (None, None)])
def test_column_values_stores_etat_as_text(etat, expected):
    data = {"name": "Houx", "etat": etat}
    values = _column_values(data)
    assert values["etat"] == expected
    assert data["etat"] is etat

# --- Concurrence: une base fichier, un vrai pool ---

@pytest_asyncio.fixture(scope="function")
async def file_database(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalogue.db'}")
    db = Database(engine)
    await db.create_tables()
    yield db
    await engine.dispose()


@pytest.mark.asyncio
async def test_concurrent_updates_on_distinct_products(file_database):
    service = ProductAdminService(database=file_database)
    first = await service.create_product(ProductCreate(name="Pivoine", stock=1))
    second = await service.create_product(ProductCreate(name="Dahlia", stock=1))

    await asyncio.gather(
        service.update_product(first, ProductUpdate(stock=10, description="Pivoine arbustive")),
        service.update_product(second, ProductUpdate(stock=20)),
    )

    assert (await fetch_product(file_database, first))["stock"] == 10
    assert (await fetch_product(file_database, first))["description"] == "Pivoine arbustive"
    assert (await fetch_product(file_database, second))["stock"] == 20


@pytest.mark.asyncio
async def test_concurrent_updates_on_same_product_keep_both_fields(file_database):
    service = ProductAdminService(database=file_database)
    product_id = await service.create_product(ProductCreate(name="Pivoine", stock=1, description="Rose"))

    await asyncio.gather(
        service.update_product(product_id, ProductUpdate(stock=10)),
        service.update_product(product_id, ProductUpdate(description="Pivoine arbustive")),
    )

    product = await fetch_product(file_database, product_id)
    assert product["stock"] == 10
    assert product["description"] == "Pivoine arbustive"
    assert product["name"] == "Pivoine"
