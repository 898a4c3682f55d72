"""Locale negotiation and message lookup.

resolve_message() is a pure function over the read-only catalogs in
messages.py, so any number of requests can call it concurrently. It never
raises: a missing key or a broken template degrades to a literal.
"""

from collections.abc import Mapping
from typing import Any

from starlette.requests import Request

from usuarios_api.config import settings
from usuarios_api.messages import CATALOGS

SUPPORTED_LOCALES: tuple[str, ...] = tuple(CATALOGS)


def normalize_locale(tag: str) -> str:
    """Turn a BCP 47 tag (``pt-br``) into catalog form (``pt_BR``)."""
    parts = tag.strip().replace("_", "-").split("-")
    if not parts or not parts[0]:
        return ""
    language = parts[0].lower()
    if len(parts) > 1 and parts[1]:
        return f"{language}_{parts[1].upper()}"
    return language


def _match_supported(locale: str) -> str | None:
    if locale in CATALOGS:
        return locale
    language = locale.split("_", 1)[0]
    if language in CATALOGS:
        return language
    for candidate in SUPPORTED_LOCALES:
        if candidate.split("_", 1)[0] == language:
            return candidate
    return None


def negotiate_locale(accept_language: str | None, default: str) -> str:
    """Pick the best supported locale for an Accept-Language header value."""
    if not accept_language:
        return default

    weighted: list[tuple[float, int, str]] = []
    for position, item in enumerate(accept_language.split(",")):
        tag, *params = item.split(";")
        quality = 1.0
        for param in params:
            name, _, value = param.partition("=")
            if name.strip().lower() != "q":
                continue
            try:
                quality = float(value)
            except ValueError:
                quality = 0.0
        if tag.strip() and tag.strip() != "*" and quality > 0:
            weighted.append((-quality, position, normalize_locale(tag)))

    for _, _, locale in sorted(weighted):
        match = _match_supported(locale)
        if match is not None:
            return match
    return default


def request_locale(request: Request) -> str:
    """Locale of the current request, negotiated once and cached on request.state."""
    locale = getattr(request.state, "locale", None)
    if locale is None:
        locale = negotiate_locale(
            request.headers.get("accept-language"), settings.default_locale
        )
        request.state.locale = locale
    return locale


def resolve_message(
    key: str,
    locale: str,
    args: Mapping[str, Any] | None = None,
    default: str | None = None,
) -> str:
    """Look up ``key`` for ``locale`` and fill placeholders from ``args``.

    Fallback order: exact locale, its language, the default locale, then
    ``default``, then the key itself.
    """
    template: str | None = None
    for candidate in (locale, locale.split("_", 1)[0], settings.default_locale):
        catalog = CATALOGS.get(candidate)
        if catalog is not None and key in catalog:
            template = catalog[key]
            break
    if template is None:
        template = default if default is not None else key
    if not args:
        return template
    try:
        return template.format_map(args)
    except (KeyError, IndexError, ValueError, TypeError, AttributeError):
        return template
