"""Factory functions for creating model instances in tests."""

from usuarios_api.models import Company, User, UserType
from usuarios_api.security import hash_password

DEFAULT_PASSWORD = "secret123"


def make_company(*, name: str = "FIAP Tecnologia") -> Company:
    return Company(name=name)


def make_user(
    *,
    name: str = "Ana",
    email: str = "ana@x.com",
    user_type: UserType = UserType.COLABORADOR,
    password: str = DEFAULT_PASSWORD,
    company_id: int | None = None,
) -> User:
    return User(
        name=name,
        email=email,
        user_type=user_type,
        password_hash=hash_password(password),
        company_id=company_id,
    )
