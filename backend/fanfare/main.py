"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi import HTTPException
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

import fanfare.runtime as runtime
from fanfare.api.errors import handle_http_exception
from fanfare.api.routers.rooms import router as rooms_router
from fanfare.core.config import Settings
from fanfare.ws.routers import router as ws_router


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.fanfare_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def startup() -> None:
    """Reset runtime state and apply logging configuration."""
    runtime.startup()
    configure_logging(runtime.settings)


@asynccontextmanager
async def lifespan(_: FastAPI):
    startup()
    yield


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=runtime.settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(HTTPException, handle_http_exception)
app.include_router(rooms_router)
app.include_router(ws_router)


def run() -> None:
    settings = runtime.settings
    uvicorn.run(app, host=settings.fanfare_app_host, port=settings.fanfare_app_port)


if __name__ == "__main__":
    run()


__all__ = [
    "app",
    "run",
    "startup",
]
