import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.http.auth import router as auth_router
from app.api.http.users import router as users_router
from app.api.http.documents import router as documents_router
from app.core.config import settings
from app.core.db import init_db
from app.core.errors import DocShareError, ValidationError
from app.core.logging import configure_logging

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    await init_db()
    logger.info("DocShare API started")
    yield


app = FastAPI(
    title="DocShare",
    description="Документы с настраиваемой видимостью и автосохранением",
    version="1.0.0",
    lifespan=lifespan
)

# Настройка CORS для работы с frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # В продакшене указать конкретные домены
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DocShareError)
async def docshare_error_handler(request: Request, exc: DocShareError) -> JSONResponse:
    """Ошибки домена в JSON; детали сбоев хранилища наружу не уходят"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Ошибки схемы запроса - тоже ValidationError (400)"""
    error = ValidationError.from_request_errors(exc.errors())
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# Подключаем роутеры
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(documents_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "DocShare API",
        "version": "1.0.0",
        "docs": "/docs"
    }
