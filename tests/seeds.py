"""Reusable seed data fixtures for integration tests."""

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories import make_company, make_user
from usuarios_api.models import UserType


@pytest_asyncio.fixture
async def seeded_db(db: AsyncSession) -> AsyncSession:
    """Seed 2 companies and 5 users (ids 1..5, Ana is id 5)."""
    acme = make_company(name="Acme Ltda")
    globex = make_company(name="Globex SA")
    db.add_all([acme, globex])
    await db.flush()

    users = [
        make_user(name="Bruno", email="bruno@x.com", user_type=UserType.GESTOR, company_id=acme.id),
        make_user(name="Carla", email="carla@x.com", company_id=acme.id),
        make_user(name="Diego", email="diego@x.com", company_id=globex.id),
        make_user(name="Elisa", email="elisa@x.com"),
        make_user(
            name="Ana", email="ana@x.com", user_type=UserType.COLABORADOR, company_id=globex.id
        ),
    ]
    for user in users:
        db.add(user)
        await db.flush()
    await db.commit()
    return db
