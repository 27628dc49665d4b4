"""
Module principal de l'API Catalogue.

Configure l'instance FastAPI (CORS, rendu des erreurs en {"error": ...}),
ouvre le pool de connexions au démarrage, inclut les routeurs publics et
admin, puis monte les fichiers statiques (page admin) en dernier.
"""
import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalogue import __version__
from catalogue.categories.router import router as categories_router
from catalogue.config import settings
from catalogue.database import Database, get_database
from catalogue.products.router import admin_router, router as products_router

# Configurer le logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Pool partagé par tout le processus, libéré à l'arrêt
    app.state.database = Database.from_settings()
    logger.info("Pool de connexions initialisé.")
    yield
    await app.state.database.dispose()
    logger.info("Pool de connexions fermé.")


app = FastAPI(
    title="Catalogue API",
    description="Catalogue produits (catégories, produits, images) pour le site et la page admin.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": message})


# ======================================================
# Routes de base
# ======================================================

@app.get("/", response_class=PlainTextResponse)
async def root():
    return "API OK. Essayez /health, /categories, /products, ou /admin.html"


@app.get("/health")
async def health():
    return {"ok": True}


@app.get("/db-ping")
async def db_ping(database: Annotated[Database, Depends(get_database)]):
    """Sonde de connectivité: renvoie {"ok": 1}."""
    try:
        return await database.ping()
    except Exception as e:
        logger.error(f"[db-ping] Database unreachable: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": str(e)})


# ======================================================
# Inclure les routeurs
# ======================================================
app.include_router(categories_router)
app.include_router(products_router)
app.include_router(admin_router)

# Page admin statique (public/admin.html), après les routes de l'API
app.mount("/", StaticFiles(directory=settings.STATIC_DIR, check_dir=False), name="static")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("catalogue.main:app", host="0.0.0.0", port=settings.PORT)
