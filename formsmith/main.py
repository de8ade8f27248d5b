import logging
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Mount

from formsmith.auth import router as auth_router
from formsmith.config import get_settings
from formsmith.exceptions import AuthenticationError, NotFoundError, StorageError, ValidationError
from formsmith.mcp_server import mcp
from formsmith.models.common import ErrorResponse, StatusResponse
from formsmith.models.questions import QUESTION_TYPE_LABELS
from formsmith.routers.editor import router as editor_router
from formsmith.routers.forms import router as forms_router
from formsmith.routers.public import router as public_router
from formsmith.storage import get_store

logger = logging.getLogger("formsmith.http")


# --- Request logging middleware ---

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response


# --- FastAPI app ---

api = FastAPI(title="Formsmith", version="0.1.0")
api.include_router(auth_router)
api.include_router(editor_router)
api.include_router(forms_router)
api.include_router(public_router)


@api.get("/api/status")
def api_status() -> StatusResponse:
    settings = get_settings()
    try:
        store = get_store()
    except StorageError as e:
        return StatusResponse(storage_backend=settings.storage_backend, ready=False, message=str(e))
    return StatusResponse(storage_backend=store.name, ready=True, message="ok")


@api.get("/api/question-types")
def question_types() -> list[dict]:
    return [{"id": qtype.value, "label": label} for qtype, label in QUESTION_TYPE_LABELS.items()]


# --- Exception handlers ---

@api.exception_handler(AuthenticationError)
async def auth_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(status_code=401, content=ErrorResponse(error_code="auth_error", message=str(exc)).model_dump())


@api.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content=ErrorResponse(error_code="not_found", message=str(exc)).model_dump())


@api.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "error_code": "validation_error",
            "message": str(exc),
            "missing_indices": exc.missing_indices,
            "invalid_indices": exc.invalid_indices,
        },
    )


@api.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error_code="storage_error",
            message="An error occurred while talking to the form store. Please try again.",
        ).model_dump(),
    )


# --- Starlette root app ---

mcp_app = mcp.http_app(path="/", stateless_http=True)

app = Starlette(
    middleware=[Middleware(RequestLoggingMiddleware)],
    routes=[
        Mount("/mcp", app=mcp_app),
        Mount("/", app=api),
    ],
    lifespan=mcp_app.lifespan,
)


def run():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "formsmith.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
