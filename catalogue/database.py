import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from catalogue.config import settings

logger = logging.getLogger(__name__)


class Database:
    """
    Accès aux données: possède le moteur async (et donc le pool de connexions).

    Une seule instance par processus, créée au démarrage de l'application et
    injectée dans les services via la dépendance `get_database`.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False  # Empêche les objets d'expirer après commit
        )

    @classmethod
    def from_settings(cls) -> "Database":
        url = settings.database_url
        kwargs: Dict[str, Any] = {"echo": settings.DB_ECHO_LOG}
        if not url.startswith("sqlite"):
            kwargs.update(pool_size=settings.DB_POOL_SIZE, max_overflow=settings.DB_MAX_OVERFLOW)
        engine = create_async_engine(url, **kwargs)
        logger.info("Moteur SQLAlchemy Async configuré.")
        return cls(engine)

    async def query(self, statement, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Exécute une requête unique sur une connexion gérée automatiquement."""
        async with self.engine.connect() as conn:
            result = await conn.execute(statement, params or {})
            if not result.returns_rows:
                return []
            return [dict(row) for row in result.mappings().all()]

    async def ping(self) -> Dict[str, Any]:
        """Sonde de connectivité: SELECT 1 AS ok."""
        rows = await self.query(text("SELECT 1 AS ok"))
        return rows[0]

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Session de lecture (sans transaction explicite)."""
        async with self.session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Transaction explicite multi-requêtes.

        COMMIT si le bloc se termine normalement, ROLLBACK sur toute exception
        (qui est propagée), la connexion est rendue au pool dans tous les cas.
        """
        session = self.session_factory()
        try:
            await session.begin()
            yield session
            await session.commit()
        except Exception as e:
            logger.warning(f"[Database] Rollback de la transaction: {e}")
            await session.rollback()
            raise
        finally:
            await session.close()
            logger.debug("Session DB fermée.")

    async def create_tables(self) -> None:
        """Crée toutes les tables définies par les modèles SQLModel."""
        # Import des modèles pour enregistrer les tables dans les métadonnées
        from catalogue.categories import models as _categories  # noqa: F401
        from catalogue.products import models as _products  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """FastAPI dependency that provides the process-wide Database."""
    database = getattr(request.app.state, "database", None)
    if database is None:
        logger.error("La base de données n'est pas initialisée.")
        raise RuntimeError("Database is not initialized.")
    return database
