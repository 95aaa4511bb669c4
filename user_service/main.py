# user_service/main.py

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from user_service.api import admin, auth, users
from user_service.core.config import Settings, settings as default_settings
from user_service.core.errors import ServiceError, StoreError, api_error
from user_service.core.log import setup_logging
from user_service.core.middleware import install_pipeline
from user_service.database import init_db


logger = logging.getLogger(__name__)


# -------------------------------
# Error Envelopes
# -------------------------------

async def service_error_handler(request: Request, exc: ServiceError):
    if isinstance(exc, StoreError):
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc.detail)
    else:
        logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.error)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    detail = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    logger.info("%s %s -> 400 invalid body: %s", request.method, request.url.path, detail)
    return JSONResponse(status_code=400, content=api_error(400, "Invalid request body", detail))


HTTP_ERROR_TITLES = {
    404: "Not found",
    405: "Method not allowed",
}


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    error = HTTP_ERROR_TITLES.get(exc.status_code, str(exc.detail))
    message = f"{request.method} {request.url.path}" if exc.status_code in HTTP_ERROR_TITLES else ""
    return JSONResponse(
        status_code=exc.status_code,
        content=api_error(exc.status_code, error, message),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=api_error(500, "Internal server error", "An unexpected error occurred"))


# -------------------------------
# Application Factory
# -------------------------------

def create_app(settings: Settings = default_settings, create_schema: bool = True) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if create_schema:
            init_db()
        logger.info("User service ready")
        yield

    app = FastAPI(title="User Service", lifespan=lifespan)
    app.state.settings = settings

    install_pipeline(app)

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(users.router)
    app.include_router(auth.router)
    app.include_router(admin.router)

    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


app = create_app()


def run():
    setup_logging(default_settings.LOG_LEVEL)
    logger.info("Starting server on port %s", default_settings.PORT)
    uvicorn.run(
        app,
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower(),
        timeout_keep_alive=default_settings.IDLE_TIMEOUT,
    )
