"""
Shared FastAPI dependencies.

Hands the app-wide services to endpoints and maps CRM errors to HTTP
responses.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
import logging

from realty_crm.core.errors import RecordNotFound, ValidationFailure, WriteFailure
from realty_crm.services.commands import CommandHandlers
from realty_crm.services.preferences import TemplateService, ThemePreference
from realty_crm.services.view_state import ViewStateStore


logger = logging.getLogger(__name__)


def get_view_state(request: Request) -> ViewStateStore:
    return request.app.state.view_state


def get_commands(request: Request) -> CommandHandlers:
    return request.app.state.commands


def get_templates(request: Request) -> TemplateService:
    return request.app.state.templates


def get_theme(request: Request) -> ThemePreference:
    return request.app.state.theme


def register_error_handlers(app: FastAPI) -> None:
    """
    Map CRM exceptions to JSON error responses.

    ValidationFailure -> 422, RecordNotFound -> 404, WriteFailure -> 502.
    The body is always {"detail": <message>}.
    """

    @app.exception_handler(ValidationFailure)
    async def _validation_failure(request: Request, exc: ValidationFailure):
        logger.info(f"Validation failure on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=422, content={"detail": exc.message})

    @app.exception_handler(RecordNotFound)
    async def _not_found(request: Request, exc: RecordNotFound):
        logger.warning(f"Not found on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})

    @app.exception_handler(WriteFailure)
    async def _write_failure(request: Request, exc: WriteFailure):
        logger.error(f"Write failure on {request.url.path}: {exc.operation}")
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": exc.message})
