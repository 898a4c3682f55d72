"""Integration tests for the form-encoded endpoints and their flash messages."""

import pytest
from httpx import AsyncClient, Response
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories import DEFAULT_PASSWORD
from usuarios_api.models import User
from usuarios_api.security import verify_password

ANA_FORM = {"name": "Ana", "email": "ana@x.com", "password": "secret", "user_type": "GESTOR"}
PT_BR = {"Accept-Language": "pt-BR"}


def _assert_redirect(resp: Response, target: str = "/usuarios") -> None:
    assert resp.status_code == 303
    assert resp.headers["location"].endswith(target)


async def _flash(client: AsyncClient) -> dict[str, object]:
    resp = await client.get("/usuarios")
    assert resp.status_code == 200
    return resp.json()


@pytest.mark.asyncio
async def test_form_create_flashes_confirmation(client: AsyncClient) -> None:
    resp = await client.post("/api/usuarios/form", data=ANA_FORM)

    _assert_redirect(resp)
    flash = await _flash(client)
    assert flash["messages"] == [{"category": "success", "message": "User created successfully"}]

    listing = (await client.get("/api/usuarios")).json()
    assert listing["items"][0]["user_type"] == "GESTOR"


@pytest.mark.asyncio
async def test_flash_is_consumed_once(client: AsyncClient) -> None:
    await client.post("/api/usuarios/form", data=ANA_FORM)
    await _flash(client)

    assert await _flash(client) == {"messages": [], "errors": {}, "form": {}}


@pytest.mark.asyncio
async def test_form_create_message_follows_locale(client: AsyncClient) -> None:
    await client.post("/api/usuarios/form", data=ANA_FORM, headers=PT_BR)

    flash = await _flash(client)
    assert flash["messages"][0]["message"] == "Usuário criado com sucesso"


@pytest.mark.asyncio
async def test_form_create_duplicate_email_flashes_error(client: AsyncClient) -> None:
    await client.post("/api/usuarios/form", data=ANA_FORM)
    await _flash(client)

    resp = await client.post("/api/usuarios/form", data=ANA_FORM, headers=PT_BR)

    _assert_redirect(resp)
    flash = await _flash(client)
    assert flash["messages"] == [{"category": "error", "message": "E-mail já cadastrado"}]
    assert (await client.get("/api/usuarios")).json()["total"] == 1


@pytest.mark.asyncio
async def test_form_create_validation_errors_keep_form_without_password(
    client: AsyncClient,
) -> None:
    resp = await client.post(
        "/api/usuarios/form", data={"name": "", "email": "nope", "password": "secret"}
    )

    _assert_redirect(resp)
    flash = await _flash(client)
    assert set(flash["errors"]) == {"name", "email"}
    assert flash["errors"]["email"] == "Invalid email address"
    assert flash["form"] == {"name": "", "email": "nope"}
    assert (await client.get("/api/usuarios")).json()["total"] == 0


@pytest.mark.asyncio
async def test_form_update_with_blank_password_keeps_credential(
    client: AsyncClient, seeded_db: AsyncSession
) -> None:
    resp = await client.post(
        "/api/usuarios/form/5", data={"name": "Ana B", "email": "ana@x.com", "password": ""}
    )

    _assert_redirect(resp)
    flash = await _flash(client)
    assert flash["messages"][0]["message"] == "User updated successfully"

    user = await seeded_db.get(User, 5)
    assert user is not None
    await seeded_db.refresh(user)
    assert user.name == "Ana B"
    assert verify_password(DEFAULT_PASSWORD, user.password_hash)


@pytest.mark.asyncio
async def test_form_update_via_put(client: AsyncClient, seeded_db: AsyncSession) -> None:
    resp = await client.put("/api/usuarios/form/5", data={"name": "Ana C"})

    _assert_redirect(resp)
    assert (await client.get("/api/usuarios/5")).json()["name"] == "Ana C"


@pytest.mark.asyncio
async def test_form_update_validation_error_returns_to_edit(
    client: AsyncClient, seeded_db: AsyncSession
) -> None:
    resp = await client.post("/api/usuarios/form/5", data={"email": "broken"})

    _assert_redirect(resp, "/usuarios?editId=5")
    flash = await _flash(client)
    assert "email" in flash["errors"]


@pytest.mark.asyncio
async def test_form_update_unknown_user_flashes_error(client: AsyncClient) -> None:
    resp = await client.post("/api/usuarios/form/999", data={"name": "Ninguém"})

    _assert_redirect(resp)
    flash = await _flash(client)
    assert flash["messages"] == [{"category": "error", "message": "User 999 not found"}]


@pytest.mark.asyncio
async def test_form_delete_requires_gestor(client: AsyncClient, seeded_db: AsyncSession) -> None:
    resp = await client.post("/api/usuarios/delete/5")

    assert resp.status_code == 403
    assert (await client.get("/api/usuarios/5")).status_code == 200


@pytest.mark.asyncio
async def test_form_delete_with_gestor_token(
    client: AsyncClient, seeded_db: AsyncSession, gestor_headers: dict[str, str]
) -> None:
    resp = await client.post("/api/usuarios/delete/5", headers={**gestor_headers, **PT_BR})

    _assert_redirect(resp)
    flash = await _flash(client)
    assert flash["messages"][0]["message"] == "Usuário removido com sucesso"
    assert (await client.get("/api/usuarios/5")).status_code == 404
