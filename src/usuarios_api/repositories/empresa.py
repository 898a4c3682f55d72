"""Company lookups. Companies are maintained elsewhere; this side only reads."""

from sqlalchemy.ext.asyncio import AsyncSession

from usuarios_api.models import Company


async def get_company_by_id(db: AsyncSession, company_id: int) -> Company | None:
    return await db.get(Company, company_id)
