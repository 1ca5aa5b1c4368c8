import logging
import traceback

from fastapi import FastAPI, Request, status, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, NoResultFound

logger = logging.getLogger(__name__)

# Códigos SQLSTATE de PostgreSQL
PGCODE_UNIQUE_VIOLATION = "23505"
PGCODE_FOREIGN_KEY_VIOLATION = "23503"
PGCODE_CHECK_VIOLATION = "23514"
PGCODE_NOT_NULL_VIOLATION = "23502"


def error_response(status_code: int, message: str, details=None, headers=None) -> JSONResponse:
    """Construye la respuesta de error con el sobre `{success, error, details}`."""
    content = {"success": False, "error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def validation_exception_handler(request: Request, exc: Exception):
    """
    Manejador para errores de validación de Pydantic en las solicitudes.
    """
    if not isinstance(exc, RequestValidationError):
        return await generic_exception_handler(request, exc)

    error_details = []
    for error in exc.errors():
        field_loc = error.get("loc", ["body"])
        if field_loc and field_loc[0] in ('body', 'query', 'path') and len(field_loc) > 1:
            field = " -> ".join(map(str, field_loc[1:]))
        else:
            field = " -> ".join(map(str, field_loc))
        message = error.get("msg", "Error de validación")
        error_details.append({"field": field, "message": message})
    logger.warning(f"Error de Validación en Request: {request.method} {request.url} - Errores: {error_details}")
    return error_response(status.HTTP_400_BAD_REQUEST, "Datos inválidos", details=error_details)


async def http_exception_handler(request: Request, exc: Exception):
    """
    Manejador para excepciones HTTP explícitas lanzadas en la aplicación.
    """
    if not isinstance(exc, StarletteHTTPException):
        return await generic_exception_handler(request, exc)

    log_message = f"HTTPException - Status: {exc.status_code}, Detail: {exc.detail}, Request: {request.method} {request.url}"
    if exc.status_code >= 500:
        logger.error(log_message)
    elif exc.status_code >= 400:
        logger.warning(log_message)
    else:
        logger.info(log_message)

    details = None
    message = exc.detail
    # Detalle estructurado: {"message": ..., "details": [...]}
    if isinstance(exc.detail, dict):
        message = exc.detail.get("message", "Error en la solicitud")
        details = exc.detail.get("details")
    return error_response(exc.status_code, message, details=details, headers=getattr(exc, "headers", None))


def _sqlstate_y_mensaje(exc: SQLAlchemyError) -> tuple[str | None, str]:
    original_exc = getattr(exc, 'orig', None)
    sqlstate = getattr(original_exc, 'sqlstate', None) or getattr(original_exc, 'pgcode', None)
    return sqlstate, str(original_exc if original_exc else exc).lower()


def es_violacion_unicidad(exc: SQLAlchemyError) -> bool:
    """Indica si el error de integridad proviene de una restricción UNIQUE."""
    sqlstate, message = _sqlstate_y_mensaje(exc)
    return sqlstate == PGCODE_UNIQUE_VIOLATION or "unique constraint" in message


def _map_integrity_error(exc: SQLAlchemyError) -> tuple[int, str]:
    sqlstate, message = _sqlstate_y_mensaje(exc)

    if es_violacion_unicidad(exc):
        return status.HTTP_409_CONFLICT, "Conflicto: ya existe un registro con datos que deben ser únicos."
    if sqlstate == PGCODE_FOREIGN_KEY_VIOLATION or "foreign key constraint" in message:
        return status.HTTP_404_NOT_FOUND, "Error de referencia: el registro vinculado no existe."
    if sqlstate == PGCODE_NOT_NULL_VIOLATION or "not null constraint" in message or "not-null constraint" in message:
        return status.HTTP_422_UNPROCESSABLE_ENTITY, "Error de datos: un campo obligatorio es nulo."
    if sqlstate == PGCODE_CHECK_VIOLATION or "check constraint" in message:
        return status.HTTP_400_BAD_REQUEST, "Los datos proporcionados violan una regla de negocio."
    return status.HTTP_409_CONFLICT, "Error de integridad en la base de datos. Verifique los datos."


async def database_exception_handler(request: Request, exc: Exception):
    """
    Manejador para errores de SQLAlchemy no capturados en las rutas.
    """
    if not isinstance(exc, SQLAlchemyError):
        return await generic_exception_handler(request, exc)

    logger.error(
        f"Database Error Handler - Type: {type(exc).__name__}, Request: {request.method} {request.url}",
        exc_info=True
    )

    if isinstance(exc, IntegrityError):
        status_code, user_message = _map_integrity_error(exc)
    elif isinstance(exc, NoResultFound):
        status_code, user_message = status.HTTP_404_NOT_FOUND, "El recurso solicitado no fue encontrado."
    else:
        status_code, user_message = status.HTTP_500_INTERNAL_SERVER_ERROR, "Error interno del servidor"

    logger.info(f"DB Handler: Mapeando error DB a -> Status={status_code}, Detail='{user_message}'")
    return error_response(status_code, user_message)


async def generic_exception_handler(request: Request, exc: Exception):
    """
    Manejador genérico para cualquier excepción no capturada por otros manejadores.
    """
    logger.critical(
        f"Unhandled Python Exception: {type(exc).__name__} - {exc}, Request: {request.method} {request.url}\n{traceback.format_exc()}"
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error interno del servidor")


def register_error_handlers(app: FastAPI):
    """Registra todos los manejadores de excepciones personalizados en la app FastAPI."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    logger.info("Manejadores de errores personalizados registrados.")
