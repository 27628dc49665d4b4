# Standard Library
from typing import AsyncGenerator, Callable, List, Optional

# Third-Party Libraries
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

# First-Party Libraries
from catalogue.main import app
from catalogue.database import Database, get_database
from catalogue.categories.models import Category
from catalogue.products.admin_service import ProductAdminService
from catalogue.products.models import Product, ProductCreate, ProductImage, UploadedImage

# DB SQLite en mémoire, une connexion partagée par test
TEST_DATABASE_URL = "sqlite+aiosqlite://"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x01\x02\x03" * 8
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x10" * 40


# --- Fixtures de Base ---

@pytest_asyncio.fixture(scope="function")
async def database() -> AsyncGenerator[Database, None]:
    """Crée un engine, des tables, et fournit un Database en mémoire pour chaque test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    db = Database(engine)
    await db.create_tables()
    yield db
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """Fournit un AsyncClient httpx qui utilise la base de test isolée."""
    app.dependency_overrides[get_database] = lambda: database
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    del app.dependency_overrides[get_database]


# --- Fixtures Catalogue ---

@pytest_asyncio.fixture(scope="function")
async def category(database: Database) -> Category:
    async with database.transaction() as session:
        cat = Category(name="Rosiers", slug="rosiers")
        session.add(cat)
        await session.flush()
    return cat


@pytest_asyncio.fixture(scope="function")
async def admin_service(database: Database) -> ProductAdminService:
    return ProductAdminService(database=database)


@pytest_asyncio.fixture(scope="function")
async def make_product(admin_service: ProductAdminService) -> Callable:
    """Fabrique: crée un produit (et ses images) via le service admin, retourne son ID."""
    async def _make(name: str = "Rosier Pierre de Ronsard", images: Optional[List[bytes]] = None, **fields) -> int:
        uploads = [
            UploadedImage(filename=f"img{i}.png", mime_type="image/png", content=content)
            for i, content in enumerate(images or [])
        ]
        return await admin_service.create_product(ProductCreate(name=name, **fields), uploads)
    return _make


# --- Helpers de vérification en base ---

async def fetch_product(database: Database, product_id: int) -> Optional[dict]:
    rows = await database.query(select(*Product.__table__.columns).where(Product.id == product_id))
    return rows[0] if rows else None


async def fetch_image_ids(database: Database, product_id: int) -> List[int]:
    rows = await database.query(
        select(ProductImage.id).where(ProductImage.product_id == product_id).order_by(ProductImage.id)
    )
    return [row["id"] for row in rows]


async def count_rows(database: Database, model) -> int:
    rows = await database.query(select(func.count().label("n")).select_from(model))
    return rows[0]["n"]
