# functions/app.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
import db
from functions import manage_users, send_reset_email
from functions.common import FunctionError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config.configure_logging()
    db.init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Foundry-PM functions", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    @app.exception_handler(FunctionError)
    async def function_error_handler(request: Request, exc: FunctionError):
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        where = ".".join(str(p) for p in first.get("loc", ())[1:])
        message = first.get("msg", "Invalid request body")
        return JSONResponse({"error": f"{where}: {message}" if where else message}, status_code=400)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse({"error": str(exc) or exc.__class__.__name__}, status_code=500)

    app.include_router(manage_users.router)
    app.include_router(send_reset_email.router)
    return app


app = create_app()
