"""Exception classification and error response shaping.

A single ordered rule table maps each exception kind to an HTTP status and a
body. Rules are tried in order and the first match wins; anything unmatched
falls through to the catch-all 500. Before giving up on a specific rule the
classifier looks one level down the ``__cause__`` chain, so a duplicate-email
IntegrityError wrapped in a generic exception still produces a 409.

Every user-facing message goes through the message catalog using the
request's locale. The handler itself never raises: if shaping the body fails
it degrades to a bare 500 envelope.
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from http import HTTPStatus
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from usuarios_api.exceptions import (
    AccessDeniedError,
    ConflictError,
    ConstraintViolationError,
    NotFoundError,
)
from usuarios_api.i18n import request_locale, resolve_message
from usuarios_api.logging import get_logger
from usuarios_api.schemas.error import ErrorResponse

logger = get_logger(__name__)

EMAIL_CONFLICT_MESSAGE = "Email already registered"

_LOCATION_ROOTS = frozenset({"body", "query", "path", "header", "cookie"})


@dataclass(frozen=True)
class ClassifiedError:
    """Outcome of classifying one exception."""

    status: int
    code: str
    message: str
    errors: dict[str, str] | None = None
    headers: Mapping[str, str] | None = None


Builder = Callable[[BaseException, str], ClassifiedError]


@dataclass(frozen=True)
class ErrorRule:
    exc_types: tuple[type[BaseException], ...]
    build: Builder


def error_path(loc: Sequence[int | str]) -> str:
    """Field name or parameter path for a pydantic error location.

    The leading request section (``body``, ``query``...) is dropped.
    """
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in _LOCATION_ROOTS:
        parts = parts[1:]
    return ".".join(parts) or "body"


def localized_errors(errors: Iterable[Mapping[str, Any]], locale: str) -> dict[str, str]:
    """Map each failing field to a localized message.

    The pydantic error type is the catalog key and its ``ctx`` fills the
    placeholders; pydantic's own message is the fallback. When a field fails
    several rules the first one is reported.
    """
    result: dict[str, str] = {}
    for error in errors:
        # A malformed JSON document is located by byte offset, not by field
        if error.get("type") == "json_invalid":
            path = "body"
        else:
            path = error_path(error.get("loc") or ())
        if path in result:
            continue
        result[path] = resolve_message(
            str(error.get("type", "")),
            locale,
            args=error.get("ctx"),
            default=str(error.get("msg", "")),
        )
    return result


def _validation_message(locale: str) -> str:
    return resolve_message("validation.failed", locale, default="Validation failed")


def _request_validation(exc: BaseException, locale: str) -> ClassifiedError:
    errors = list(cast(RequestValidationError, exc).errors())
    from_body = all((err.get("loc") or ("body",))[0] == "body" for err in errors)
    return ClassifiedError(
        status=400,
        code="validation_failed" if from_body else "constraint_violation",
        message=_validation_message(locale),
        errors=localized_errors(errors, locale),
    )


def violation_messages(exc: ConstraintViolationError, locale: str) -> dict[str, str]:
    """Localize the message keys carried by a ConstraintViolationError."""
    return {
        path: resolve_message(key, locale, args=exc.args_for_messages)
        for path, key in exc.violations.items()
    }


def _constraint_violation(exc: BaseException, locale: str) -> ClassifiedError:
    errors = violation_messages(cast(ConstraintViolationError, exc), locale)
    return ClassifiedError(400, "constraint_violation", _validation_message(locale), errors)


def _not_found(exc: BaseException, locale: str) -> ClassifiedError:
    not_found = cast(NotFoundError, exc)
    message = not_found.message
    if not_found.message_key:
        message = resolve_message(
            not_found.message_key,
            locale,
            args={"id": not_found.identifier},
            default=not_found.message,
        )
    if not message:
        message = resolve_message("error.not_found", locale, default="Resource not found")
    return ClassifiedError(404, "not_found", message)


def _conflict(exc: BaseException, locale: str) -> ClassifiedError:
    return ClassifiedError(409, "conflict", EMAIL_CONFLICT_MESSAGE)


def _access_denied(exc: BaseException, locale: str) -> ClassifiedError:
    message = resolve_message("auth.unauthorized", locale, default="Access denied")
    return ClassifiedError(403, "forbidden", message)


def _http_error(exc: BaseException, locale: str) -> ClassifiedError:
    http_exc = cast(StarletteHTTPException, exc)
    status = http_exc.status_code
    message = str(http_exc.detail) if http_exc.detail else HTTPStatus(status).phrase
    return ClassifiedError(status, "http_error", message, headers=http_exc.headers)


def _internal(exc: BaseException, locale: str) -> ClassifiedError:
    # Driver errors carry SQL text; only the log gets to see it
    detail = "" if isinstance(exc, SQLAlchemyError) else str(exc)
    message = detail or resolve_message("error.internal", locale, default="Internal server error")
    return ClassifiedError(500, "internal_error", message)


CONFLICT_TYPES: tuple[type[BaseException], ...] = (IntegrityError, ConflictError)
CONFLICT_RULE = ErrorRule(CONFLICT_TYPES, _conflict)

RULES: tuple[ErrorRule, ...] = (
    ErrorRule((RequestValidationError,), _request_validation),
    ErrorRule((ConstraintViolationError,), _constraint_violation),
    ErrorRule((NotFoundError,), _not_found),
    CONFLICT_RULE,
    ErrorRule((AccessDeniedError,), _access_denied),
    ErrorRule((StarletteHTTPException,), _http_error),
)
FALLBACK_RULE = ErrorRule((Exception,), _internal)


def classify(exc: BaseException) -> ErrorRule:
    """Return the rule that handles ``exc``."""
    for rule in RULES:
        if isinstance(exc, rule.exc_types):
            return rule
    if isinstance(exc.__cause__, CONFLICT_TYPES):
        return CONFLICT_RULE
    return FALLBACK_RULE


def classify_exception(exc: BaseException, locale: str) -> ClassifiedError:
    return classify(exc).build(exc, locale)


def error_body(classified: ClassifiedError) -> dict[str, Any]:
    """Serialize a classified error into the standard envelope."""
    return ErrorResponse(
        timestamp=datetime.now(UTC).isoformat(),
        status=classified.status,
        code=classified.code,
        message=classified.message,
        errors=classified.errors or None,
    ).model_dump(exclude_none=True)


async def handle_exception(request: Request, exc: Exception) -> JSONResponse:
    """Exception handler registered for every kind in the rule table."""
    try:
        classified = classify_exception(exc, request_locale(request))
        body = error_body(classified)
    except Exception:
        logger.exception("error_classification_failed", path=request.url.path)
        classified = ClassifiedError(500, "internal_error", "Internal server error")
        body = error_body(classified)

    if classified.status >= 500:
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            exc_info=exc,
        )
    else:
        logger.warning(
            "request_failed",
            status=classified.status,
            code=classified.code,
            path=request.url.path,
        )

    return JSONResponse(
        status_code=classified.status,
        content=body,
        headers=dict(classified.headers) if classified.headers else None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Route every classified exception kind, plus the catch-all, to handle_exception."""
    for rule in RULES:
        for exc_type in rule.exc_types:
            app.add_exception_handler(exc_type, handle_exception)
    app.add_exception_handler(Exception, handle_exception)
