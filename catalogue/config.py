import logging
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# Charger les variables d'environnement AVANT de définir la classe Settings
load_dotenv()


class Settings(BaseSettings):
    # --- Serveur ---
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"
    STATIC_DIR: str = "public"
    CORS_ORIGINS: List[str] = ["*"]

    # --- Base de Données ---
    # DATABASE_URL prime sur les variables POSTGRES_* si elle est définie
    DATABASE_URL: Optional[str] = None
    POSTGRES_DB: str = "catalogue"
    POSTGRES_USER: str = "catalogue"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    DB_ECHO_LOG: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # --- Uploads ---
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024  # 5 Mo par fichier
    MAX_IMAGE_FILES: int = 20  # champ "images" (le champ "image" reste limité à 1)

    # --- Cache HTTP ---
    PRODUCTS_CACHE_CONTROL: str = "public, max-age=300, stale-while-revalidate=60"
    IMAGES_CACHE_CONTROL: str = "public, max-age=3600"

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = 'ignore'

    @property
    def database_url(self) -> str:
        """URL SQLAlchemy async, normalisée pour asyncpg."""
        if self.DATABASE_URL:
            url = self.DATABASE_URL
            if url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql+asyncpg://", 1)
            elif url.startswith("postgresql://"):
                url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            return url
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


settings = Settings()

if not settings.DATABASE_URL and not settings.POSTGRES_PASSWORD:
    logger.warning("Ni DATABASE_URL ni POSTGRES_PASSWORD ne sont définis. La connexion à la base risque d'échouer.")

logger.info(f"Configuration chargée: port={settings.PORT}, DB host={settings.POSTGRES_HOST if not settings.DATABASE_URL else '<DATABASE_URL>'}")
