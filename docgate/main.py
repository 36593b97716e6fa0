"""FastAPI application entrypoint with RAG engine lifecycle management."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from docgate.config import Settings
from docgate.logging_config import setup_logging
from docgate.rag import RAGEngine
from docgate.routes import admin_router, health_router, questions_router

logger = logging.getLogger(__name__)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error | path={request.url.path}")
    return JSONResponse(status_code=500, content={"error": str(exc) or "server error"})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "invalid request") if errors else "invalid request"
    return JSONResponse(status_code=400, content={"error": message})


def create_app(settings: Optional[Settings] = None, rag: Optional[RAGEngine] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        if getattr(app.state, "rag", None) is None:
            app.state.rag = RAGEngine(settings)
        yield

    app = FastAPI(title="docgate", lifespan=lifespan)
    app.state.rag = rag

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(health_router)
    app.include_router(questions_router)
    app.include_router(admin_router)

    if settings.public_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="public")

    return app


app = create_app()


def run():
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    logger.info(f"Server listening on http://{settings.host}:{settings.port}")
    uvicorn.run("docgate.main:app", host=settings.host, port=settings.port)
