"""User business logic.

Turns validated payloads into User entities and delegates persistence to the
repository layer. Integrity errors from the database (duplicate email) are
left to propagate; the error classifier owns their translation.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from usuarios_api.config import settings
from usuarios_api.exceptions import ConstraintViolationError, NotFoundError
from usuarios_api.logging import get_logger
from usuarios_api.models import Company, User
from usuarios_api.repositories import usuario as repo
from usuarios_api.repositories.empresa import get_company_by_id
from usuarios_api.schemas.pagination import Paginated
from usuarios_api.schemas.usuario import UserCreate, UserUpdate
from usuarios_api.security import hash_password

logger = get_logger(__name__)


async def resolve_company(db: AsyncSession, company_id: int | None) -> Company | None:
    """Look up the company a payload refers to.

    An unknown id is dropped with a warning unless strict_company_reference
    is enabled, in which case the request fails validation on company_id.
    """
    if company_id is None:
        return None
    company = await get_company_by_id(db, company_id)
    if company is None:
        if settings.strict_company_reference:
            raise ConstraintViolationError(
                {"company_id": "company.not_found"}, company_id=company_id
            )
        logger.warning("company_not_found", company_id=company_id)
    return company


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await repo.get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User", user_id, message_key="user.not_found")
    return user


async def list_users(db: AsyncSession, page: int, size: int) -> Paginated[User]:
    items = await repo.list_users(db, offset=page * size, limit=size)
    total = await repo.count_users(db)
    return Paginated(items=items, total=total, page=page, size=size)


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    company = await resolve_company(db, data.company_id)
    user = User(
        name=data.name,
        email=data.email,
        user_type=data.user_type,
        password_hash=hash_password(data.password),
        company_id=company.id if company is not None else None,
    )
    user = await repo.save_user(db, user)
    logger.info("user_created", user_id=user.id)
    return user


async def update_user(db: AsyncSession, user_id: int, data: UserUpdate) -> User:
    """Merge the supplied fields into the stored user.

    Fields absent from the payload keep their stored values; the credential
    is only replaced when a non-blank password was sent.
    """
    user = await get_user(db, user_id)
    changes = data.changes()

    if "company_id" in changes:
        company = await resolve_company(db, changes.pop("company_id"))
        if company is not None:
            user.company_id = company.id
    password = changes.pop("password", None)
    if password:
        user.password_hash = hash_password(password)
    for field, value in changes.items():
        setattr(user, field, value)

    user = await repo.save_user(db, user)
    logger.info("user_updated", user_id=user.id, fields=sorted(data.changes()))
    return user


async def delete_user(db: AsyncSession, user_id: int) -> None:
    user = await get_user(db, user_id)
    await repo.delete_user(db, user)
    logger.info("user_deleted", user_id=user_id)
