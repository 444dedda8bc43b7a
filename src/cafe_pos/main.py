from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from cafe_pos.api import health
from cafe_pos.api.routes.orders import router as orders_router
from cafe_pos.config import settings
from cafe_pos.errors import ApiError, UnexpectedError
from cafe_pos.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    logger.info("Application started")
    yield
    logger.info("Application stopped")


app = FastAPI(title="Cafe POS", lifespan=lifespan)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    error = UnexpectedError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# Подключаем роуты
app.include_router(health.router)
app.include_router(orders_router)
