from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from moderation import __version__
from moderation.api.errors import register_exception_handlers
from moderation.api.routers import edit_proposals, health, moderation
from moderation.core.config import get_settings
from moderation.core.logger import configure_from_settings
from moderation.db.session import init_db

settings = get_settings()
logger = configure_from_settings(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.app_name} {__version__} started")
    yield


app = FastAPI(
    title=settings.app_name,
    description="Moderation and crowd-sourced edit workflow for the content directory",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(moderation.router, prefix="/api")
app.include_router(edit_proposals.router, prefix="/api")
app.include_router(health.router)


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else None,
    }
