import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette import status
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from courtside.config import config, environment
from courtside.database import database
from courtside.logic.users import create_admin_user_when_missing
from courtside.routes import auth, games, leagues, registrations, teams, users
from courtside.utils.alembic import alembic_run_migrations
from courtside.utils.logging import logger


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    await database.connect()

    if config.auto_run_migrations:
        await asyncio.to_thread(alembic_run_migrations)

    await create_admin_user_when_missing()
    logger.info("Courtside API started (environment=%s)", environment.value)

    yield

    await database.disconnect()


app = FastAPI(
    title="Courtside API",
    docs_url="/docs",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in config.cors_origins.split(",")],
    allow_origin_regex=config.cors_origin_regex or None,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/ping", summary="Healthcheck ping")
async def ping() -> str:
    return "ping"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        {"detail": jsonable_encoder(exc.errors())},
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        {"detail": "Internal server error"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


routers = {
    "Auth": auth.router,
    "Users": users.router,
    "Leagues": leagues.router,
    "Teams": teams.router,
    "Games": games.router,
    "Registrations": registrations.router,
}

for tag, router in routers.items():
    app.include_router(router, tags=[tag])
