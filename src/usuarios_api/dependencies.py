"""Shared FastAPI dependencies.

Reusable type aliases that routers import. Defined here (not in main.py) to
avoid circular imports when routers are registered in main.
"""

from typing import Annotated

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from usuarios_api.db.session import get_db
from usuarios_api.i18n import request_locale
from usuarios_api.models import MAX_ID
from usuarios_api.security import require_gestor

DB = Annotated[AsyncSession, Depends(get_db)]
Locale = Annotated[str, Depends(request_locale)]
GestorOnly = Depends(require_gestor)
UserId = Annotated[int, Path(ge=1, le=MAX_ID)]
