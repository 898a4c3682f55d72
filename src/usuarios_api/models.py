"""SQLAlchemy models.

Define all ORM models here. They must inherit from Base so that
Alembic's autogenerate can detect them.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from usuarios_api.db.session import Base

# Largest value an Integer primary or foreign key column can hold
MAX_ID = 2**31 - 1


class UserType(enum.StrEnum):
    GESTOR = "GESTOR"
    COLABORADOR = "COLABORADOR"


class Company(Base):
    """Company a user may belong to. Managed outside this service."""

    __tablename__ = "empresas"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(150))

    users: Mapped[list["User"]] = relationship(back_populates="company")


class User(Base):
    __tablename__ = "usuarios"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True)
    user_type: Mapped[UserType] = mapped_column(
        Enum(UserType, native_enum=False, length=20), default=UserType.COLABORADOR
    )
    password_hash: Mapped[str] = mapped_column(String(255))
    company_id: Mapped[int | None] = mapped_column(
        ForeignKey("empresas.id", ondelete="SET NULL"), index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    company: Mapped["Company | None"] = relationship(back_populates="users")
