"""Form-encoded Usuario endpoints for the server-rendered UI.

Every action answers 303 See Other and leaves its outcome in the session as
flash state: advisory messages, field errors and the submitted values (minus
the password) so the page can re-render the form. GET /usuarios hands that
state to the UI once and forgets it.
"""

from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from usuarios_api.dependencies import DB, GestorOnly, Locale, UserId
from usuarios_api.errors import localized_errors, violation_messages
from usuarios_api.exceptions import ConstraintViolationError, NotFoundError
from usuarios_api.i18n import resolve_message
from usuarios_api.logging import get_logger
from usuarios_api.schemas.usuario import UserCreate, UserUpdate
from usuarios_api.services import usuario as service

logger = get_logger(__name__)

router = APIRouter(tags=["usuarios-form"])

_FLASH_MESSAGES = "flash_messages"
_FLASH_ERRORS = "flash_errors"
_FLASH_FORM = "flash_form"


def _flash(request: Request, message: str, *, category: str = "info") -> None:
    messages = request.session.get(_FLASH_MESSAGES)
    if not isinstance(messages, list):
        messages = []
    messages.append({"category": category, "message": message})
    request.session[_FLASH_MESSAGES] = messages


def _flash_form(request: Request, errors: dict[str, str], data: dict[str, str]) -> None:
    request.session[_FLASH_ERRORS] = errors
    request.session[_FLASH_FORM] = {k: v for k, v in data.items() if k != "password"}


def _consume_flash(request: Request) -> dict[str, Any]:
    return {
        "messages": request.session.pop(_FLASH_MESSAGES, []),
        "errors": request.session.pop(_FLASH_ERRORS, {}),
        "form": request.session.pop(_FLASH_FORM, {}),
    }


async def _form_data(request: Request) -> dict[str, str]:
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


def _redirect(request: Request, edit_id: int | None = None) -> RedirectResponse:
    url = str(request.url_for("usuarios_page"))
    if edit_id is not None:
        url = f"{url}?editId={edit_id}"
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/usuarios", name="usuarios_page")
async def usuarios_page(request: Request) -> dict[str, Any]:
    """Flash state for the users page; reading it clears it."""
    return _consume_flash(request)


@router.post("/api/usuarios/form", response_class=RedirectResponse)
async def create_usuario_form(request: Request, db: DB, locale: Locale) -> RedirectResponse:
    data = await _form_data(request)
    try:
        payload = UserCreate.model_validate(data)
    except ValidationError as exc:
        _flash_form(request, localized_errors(exc.errors(), locale), data)
        return _redirect(request)

    try:
        await service.create_user(db, payload)
    except IntegrityError:
        await db.rollback()
        logger.info("form_create_duplicate_email", email=payload.email)
        _flash(request, resolve_message("user.email.exists", locale), category="error")
        return _redirect(request)
    except ConstraintViolationError as exc:
        _flash_form(request, violation_messages(exc, locale), data)
        return _redirect(request)

    _flash(request, resolve_message("user.created", locale), category="success")
    return _redirect(request)


@router.api_route(
    "/api/usuarios/form/{user_id}", methods=["POST", "PUT"], response_class=RedirectResponse
)
async def update_usuario_form(
    request: Request, db: DB, locale: Locale, user_id: UserId
) -> RedirectResponse:
    """Partial update from the edit form; a blank password keeps the current one."""
    data = await _form_data(request)
    try:
        payload = UserUpdate.model_validate(data)
    except ValidationError as exc:
        _flash_form(request, localized_errors(exc.errors(), locale), data)
        return _redirect(request, edit_id=user_id)

    try:
        await service.update_user(db, user_id, payload)
    except NotFoundError:
        message = resolve_message("user.not_found", locale, {"id": user_id})
        _flash(request, message, category="error")
        return _redirect(request)
    except IntegrityError:
        await db.rollback()
        _flash(request, resolve_message("user.email.exists", locale), category="error")
        return _redirect(request, edit_id=user_id)
    except ConstraintViolationError as exc:
        _flash_form(request, violation_messages(exc, locale), data)
        return _redirect(request, edit_id=user_id)

    _flash(request, resolve_message("user.updated", locale), category="success")
    return _redirect(request)


@router.post(
    "/api/usuarios/delete/{user_id}",
    response_class=RedirectResponse,
    dependencies=[GestorOnly],
)
async def delete_usuario_form(
    request: Request, db: DB, locale: Locale, user_id: UserId
) -> RedirectResponse:
    try:
        await service.delete_user(db, user_id)
    except NotFoundError:
        message = resolve_message("user.not_found", locale, {"id": user_id})
        _flash(request, message, category="error")
        return _redirect(request)

    _flash(request, resolve_message("user.deleted", locale), category="success")
    return _redirect(request)
