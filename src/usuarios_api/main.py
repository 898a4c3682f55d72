from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text
from starlette.middleware.sessions import SessionMiddleware

from usuarios_api.config import settings
from usuarios_api.db.session import shutdown
from usuarios_api.dependencies import DB
from usuarios_api.errors import register_exception_handlers
from usuarios_api.logging import get_logger
from usuarios_api.middleware import RequestContextMiddleware
from usuarios_api.routers import usuario, usuario_form

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Close pooled database connections on shutdown."""
    logger.info("startup", default_locale=settings.default_locale)
    yield
    await shutdown()


app = FastAPI(title="Usuarios API", lifespan=lifespan)
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie="usuarios_session",
    same_site="lax",
)

register_exception_handlers(app)

app.include_router(usuario.router)
app.include_router(usuario_form.router)


@app.get("/health")
async def health(db: DB) -> dict[str, str]:
    """Health check endpoint — verifies database connectivity."""
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}
