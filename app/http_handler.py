import uuid
from contextlib import asynccontextmanager
from typing import Any, Sequence

import uvicorn
from aws_lambda_powertools import Logger
from aws_lambda_powertools.logging.logger import set_package_logger
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import UJSONResponse
from mangum import Mangum

from app import settings
from app.api.v1.api import router as api_v1_router
from app.exceptions import UploadException
from app.middlewares import CorrelationIdMiddleware
from app.models.camel_model import CamelModel
from app.repositories.draft_repository import DraftRepository
from app.repositories.post_repository import PostRepository
from app.services.auth_service import AuthService
from app.services.editor_session import EditorSessionRegistry
from app.services.post_service import PostService
from app.services.upload_provider import create_upload_provider
from app.services.upload_service import UploadService

if settings.debug:
    set_package_logger()

logger = Logger(utc=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    post_service = PostService(PostRepository(settings))
    app.state.auth_service = AuthService(settings)
    app.state.post_service = post_service
    app.state.upload_service = UploadService(settings, create_upload_provider(settings))
    app.state.editor_sessions = EditorSessionRegistry(
        post_service,
        DraftRepository(settings),
        settings.autosave_interval_in_seconds,
        settings.editor_session_ttl_in_seconds,
    )
    logger.info(f"Application started {settings.stage=} {settings.upload_provider=}")
    yield
    await app.state.editor_sessions.close()
    logger.info("Application stopped")


app = FastAPI(
    debug=settings.debug,
    title="SpawnWriteBackendApplication",
    version="1.0.0",
    lifespan=lifespan,
)
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(GZipMiddleware)
app.include_router(api_v1_router)

handler = Mangum(app)
handler = logger.inject_lambda_context(handler, clear_state=True, log_event=True)


class ErrorResponse(CamelModel):
    status: int
    id: uuid.UUID
    message: str


class ValidationErrorResponse(ErrorResponse):
    errors: Sequence[Any]


def error_response(
    status_code: int,
    message: str,
    error_id: uuid.UUID,
    errors: Sequence[Any] | None = None,
) -> UJSONResponse:
    if errors is None:
        body = ErrorResponse(status=status_code, id=error_id, message=message)
    else:
        body = ValidationErrorResponse(
            status=status_code, id=error_id, message=message, errors=errors
        )
    return UJSONResponse(content=jsonable_encoder(body), status_code=status_code)


@app.exception_handler(BotoCoreError)
@app.exception_handler(ClientError)
async def storage_error_handler(
    request: Request, error: BotoCoreError
) -> UJSONResponse:
    error_id = uuid.uuid4()
    logger.exception(f"Storage call failed {error_id=} path={request.url.path}")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(error) if settings.debug else "Internal Server Error",
        error_id,
    )


@app.exception_handler(UploadException)
async def upload_error_handler(
    request: Request, error: UploadException
) -> UJSONResponse:
    logger.warning(f"Upload rejected {error.status_code=} {error.detail=}")
    return UJSONResponse(content={"error": error.detail}, status_code=error.status_code)


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, error: HTTPException) -> UJSONResponse:
    error_id = uuid.uuid4()
    logger.info(
        f"Request failed {error_id=} {error.status_code=} path={request.url.path}"
    )
    return error_response(error.status_code, error.detail, error_id)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, error: RequestValidationError
) -> UJSONResponse:
    error_id = uuid.uuid4()
    logger.info(f"Invalid request {error_id=} path={request.url.path}")
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Request validation failed",
        error_id,
        errors=jsonable_encoder(error.errors()),
    )


if __name__ == "__main__":
    uvicorn.run("app.http_handler:app", host="localhost", port=8080, reload=True)
