import pytest

from usuarios_api.i18n import negotiate_locale, normalize_locale, resolve_message


@pytest.mark.parametrize(
    "tag, expected",
    [("pt-br", "pt_BR"), ("pt_BR", "pt_BR"), ("EN", "en"), ("en-US", "en_US"), ("", "")],
)
def test_normalize_locale(tag: str, expected: str) -> None:
    assert normalize_locale(tag) == expected


@pytest.mark.parametrize(
    "header, expected",
    [
        (None, "en"),
        ("", "en"),
        ("pt-BR", "pt_BR"),
        ("pt", "pt_BR"),
        ("pt-PT", "pt_BR"),
        ("en-US,en;q=0.8", "en"),
        ("fr-FR, pt-BR;q=0.7, en;q=0.5", "pt_BR"),
        ("en;q=0.2, pt-BR;q=0.9", "pt_BR"),
        ("de, fr", "en"),
        ("*", "en"),
        ("pt-BR;q=abc, en", "en"),
        ("pt-BR;q=0.8;level=1, en;q=0.5", "pt_BR"),
        ("en;level=1;q=0.1, pt-BR;q=0.5", "pt_BR"),
    ],
)
def test_negotiate_locale(header: str | None, expected: str) -> None:
    assert negotiate_locale(header, "en") == expected


def test_resolve_uses_requested_catalog() -> None:
    assert resolve_message("user.created", "pt_BR") == "Usuário criado com sucesso"
    assert resolve_message("user.created", "en") == "User created successfully"


def test_resolve_falls_back_to_default_locale() -> None:
    assert resolve_message("user.created", "fr") == "User created successfully"


def test_resolve_missing_key_returns_default_then_key() -> None:
    assert resolve_message("no.such.key", "pt_BR", default="Fallback") == "Fallback"
    assert resolve_message("no.such.key", "pt_BR") == "no.such.key"


def test_resolve_fills_placeholders() -> None:
    message = resolve_message("string_too_short", "en", {"min_length": 6})
    assert message == "Must have at least 6 characters"


def test_resolve_never_raises_on_bad_arguments() -> None:
    # Missing placeholder value leaves the template untouched
    assert resolve_message("string_too_short", "en", {"other": 1}) == (
        "Must have at least {min_length} characters"
    )
    assert resolve_message("{0} {", "en", {"x": 1}) == "{0} {"
