"""
Exception handlers normalizing every error into the API envelope:

    {"success": false, "statusCode": 404, "message": "Caisse introuvable"}

Validation errors additionally carry field-level messages under ``errors``.
"""
import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

LOCATION_PREFIXES = ("body", "query", "path", "header", "cookie")


def error_response(status_code: int, message: str, headers: dict = None, **extra) -> JSONResponse:
    content = {"success": False, "statusCode": status_code, "message": message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _field_name(loc) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts)


def _translate(error: dict) -> str:
    """Traduit un message d'erreur pydantic en français."""
    error_type = error.get("type", "")
    message = error.get("msg", "")
    ctx = error.get("ctx") or {}

    if error_type == "value_error":
        if message.startswith("Value error, "):
            return message[len("Value error, "):]
        if "email" in message:
            return "Email invalide"
        return message
    if error_type == "missing":
        return "Champ requis"
    if error_type == "string_too_long":
        return f"Ne doit pas dépasser {ctx.get('max_length')} caractères"
    if error_type == "string_too_short":
        return f"Doit contenir au moins {ctx.get('min_length')} caractère(s)"
    if error_type == "string_type":
        return "Chaîne de caractères attendue"
    if error_type in ("uuid_parsing", "uuid_type"):
        return "Identifiant invalide"
    if error_type in ("int_parsing", "int_type", "int_from_float"):
        return "Nombre entier attendu"
    if error_type in ("decimal_parsing", "decimal_type", "float_parsing", "float_type"):
        return "Nombre attendu"
    if error_type in ("bool_parsing", "bool_type"):
        return "Booléen attendu"
    if error_type in ("greater_than_equal", "greater_than"):
        limit = ctx.get("ge", ctx.get("gt"))
        return f"Doit être supérieur ou égal à {limit}"
    if error_type in ("less_than_equal", "less_than"):
        limit = ctx.get("le", ctx.get("lt"))
        return f"Doit être inférieur ou égal à {limit}"
    if error_type == "decimal_max_places":
        return f"Au plus {ctx.get('decimal_places')} décimales"
    if error_type == "json_invalid":
        return "JSON invalide"
    if error_type in ("model_attributes_type", "dict_type", "model_type"):
        return "Objet attendu"
    if error_type == "list_type":
        return "Liste attendue"
    if error_type == "literal_error" or error_type == "enum":
        return f"Valeur invalide, attendu: {ctx.get('expected')}"
    return message


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Erreur"
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": _field_name(error.get("loc", ())), "message": _translate(error)}
        for error in exc.errors()
    ]
    first_message = errors[0]["message"] if errors else "Erreur de validation"
    logger.info(f"Validation failed on {request.method} {request.url.path}: {errors}")
    return error_response(status.HTTP_400_BAD_REQUEST, first_message, errors=errors)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Erreur interne du serveur")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
