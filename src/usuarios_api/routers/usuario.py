"""Usuario JSON endpoints."""

from fastapi import APIRouter, Query, Response

from usuarios_api.dependencies import DB, GestorOnly, UserId
from usuarios_api.models import MAX_ID
from usuarios_api.schemas.usuario import UserCreate, UserPage, UserResponse, UserUpdate
from usuarios_api.services import usuario as service

router = APIRouter(prefix="/api/usuarios", tags=["usuarios"])


@router.post("", response_model=UserResponse, status_code=201)
async def create_usuario(db: DB, payload: UserCreate) -> UserResponse:
    """Create a user. A duplicate email answers 409."""
    user = await service.create_user(db, payload)
    return UserResponse.model_validate(user)


@router.get("", response_model=UserPage, status_code=200)
async def list_usuarios(
    db: DB,
    page: int = Query(0, ge=0, le=MAX_ID),
    size: int = Query(10, ge=1, le=100),
) -> UserPage:
    """List users one zero-based page at a time, ordered by id."""
    result = await service.list_users(db, page, size)
    return UserPage.model_validate(result)


@router.get("/{user_id}", response_model=UserResponse, status_code=200)
async def get_usuario(db: DB, user_id: UserId) -> UserResponse:
    user = await service.get_user(db, user_id)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse, status_code=200)
async def update_usuario(db: DB, user_id: UserId, payload: UserUpdate) -> UserResponse:
    """Merge the supplied fields into the user; omitted fields are untouched."""
    user = await service.update_user(db, user_id, payload)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=204, dependencies=[GestorOnly])
async def delete_usuario(db: DB, user_id: UserId) -> Response:
    await service.delete_user(db, user_id)
    return Response(status_code=204)
