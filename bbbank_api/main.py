"""BBBank API - FastAPI application entry point.

Serves the account number existence check used by the account forms.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator
from beanie import init_beanie
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo import AsyncMongoClient
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from bbbank_api.exceptions import (
    AccountLookupError,
    account_lookup_exception_handler,
    exception_handler,
)
from bbbank_api.limiter import limiter
from bbbank_api.models.database import Account
from bbbank_api.routes import api
from bbbank_api.settings import settings


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger("bbbank.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    client: AsyncMongoClient[Any] = AsyncMongoClient(
        settings.DATABASE_URL.get_secret_value()
    )
    await init_beanie(
        database=client[settings.DATABASE_NAME],
        document_models=[Account],
    )
    logger.info("Connected to database '%s'", settings.DATABASE_NAME)

    yield

    await client.close()
    logger.info("Database connection closed")


origins = settings.ALLOWED_ORIGINS.split(",") if settings.ALLOWED_ORIGINS else []

app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_TITLE,
    version=settings.APP_VERSION,
)

app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
    expose_headers=[
        "Retry-After",
        "X-RateLimit-Reset",
        "X-RateLimit-Limit",
        "X-RateLimit-Remaining",
    ],
)

app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
app.add_exception_handler(AccountLookupError, account_lookup_exception_handler)
app.add_exception_handler(Exception, exception_handler)

app.include_router(api.router)
