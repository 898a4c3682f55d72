"""Credential hashing and role checks."""

import secrets

from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext

from usuarios_api.config import settings
from usuarios_api.exceptions import AccessDeniedError
from usuarios_api.logging import get_logger

logger = get_logger(__name__)

GESTOR_ROLE = "GESTOR"

_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
_bearer = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return _pwd_context.verify(password, hashed)
    except ValueError:
        return False


async def require_gestor(request: Request) -> None:
    """Dependency that lets only bearers of a GESTOR token through.

    Tokens are compared in constant time. Anything else raises
    AccessDeniedError, which the classifier turns into a localized 403.
    """
    credentials: HTTPAuthorizationCredentials | None = await _bearer(request)
    if credentials is not None and credentials.scheme.lower() == "bearer":
        provided = credentials.credentials
        for token in settings.gestor_tokens:
            if secrets.compare_digest(provided.encode(), token.encode()):
                return None

    logger.warning("access_denied", role=GESTOR_ROLE, path=request.url.path)
    raise AccessDeniedError(GESTOR_ROLE)
