# backend/moodguard/interfaces/http/main.py
from __future__ import annotations

import logging
import os
import traceback
import uuid

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from moodguard.core.config import get_settings
from moodguard.core.errors import MoodguardError
from moodguard.core.events import register_lifecycle

logger = logging.getLogger("moodguard.http")


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Moodguard API", version="0.1.0")
    register_lifecycle(app)

    allowed_origins = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]
    env_origins = os.getenv("ALLOWED_ORIGINS")
    if env_origins:
        allowed_origins.extend(o.strip() for o in env_origins.split(",") if o.strip())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins if settings.ENV == "production" else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # simple liveness
    @app.get("/_/ping")
    def _ping():
        return {"ok": True}

    # Every error response carries a request_id that also appears in the logs.

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        req_id = str(uuid.uuid4())
        logger.warning("HTTPException %s %s %s", req_id, exc.status_code, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "http_error",
                "status_code": exc.status_code,
                "message": exc.detail,
                "request_id": req_id,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        req_id = str(uuid.uuid4())
        logger.warning("ValidationError %s %s", req_id, exc)
        return JSONResponse(
            status_code=422,
            content={
                "error": "validation_error",
                "message": "Invalid request payload",
                "details": exc.errors(),
                "request_id": req_id,
            },
        )

    @app.exception_handler(MoodguardError)
    async def classifier_error_handler(request: Request, exc: MoodguardError):
        req_id = str(uuid.uuid4())
        logger.warning("MoodguardError %s %s", req_id, exc)
        return JSONResponse(
            status_code=503,
            content={
                "error": "upstream_unavailable",
                "type": exc.__class__.__name__,
                "message": str(exc),
                "request_id": req_id,
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        req_id = str(uuid.uuid4())
        tb = traceback.format_exc()
        logger.error("Unhandled exception %s %s\n%s", req_id, exc, tb)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "type": exc.__class__.__name__,
                "message": str(exc),
                "request_id": req_id,
            },
        )

    from moodguard.interfaces.http.routers import api

    app.include_router(api, prefix="/v1")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    debug = get_settings().DEBUG
    uvicorn.run(
        "moodguard.interfaces.http.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=debug,
        log_level="debug" if debug else "info",
    )
