"""HTTP error mapping for the REST surface."""

from __future__ import annotations

from typing import Any, NoReturn

from fastapi import HTTPException
from fastapi import Request
from fastapi.responses import JSONResponse

from fanfare_engine.errors import GameError

HTTP_STATUS_BY_CATEGORY = {
    "VALIDATION_ERROR": 400,
    "AUTHORIZATION_ERROR": 403,
    "RESOURCE_ERROR": 409,
    "TERMINAL_STATE_ERROR": 409,
}
HTTP_STATUS_BY_CODE = {
    "ROOM_NOT_FOUND": 404,
    "NOT_IN_ROOM": 404,
}


def error_body(*, code: str, message: str, detail: dict[str, Any] | None = None) -> dict[str, Any]:
    return {"code": code, "message": message, "detail": detail or {}}


def status_for(exc: GameError) -> int:
    if exc.code in HTTP_STATUS_BY_CODE:
        return HTTP_STATUS_BY_CODE[exc.code]
    return HTTP_STATUS_BY_CATEGORY.get(exc.category, 400)


def raise_game_error(exc: GameError) -> NoReturn:
    """Re-raise a rejected registry call as an HTTPException with the unified body."""
    raise HTTPException(
        status_code=status_for(exc),
        detail=error_body(code=exc.code, message=exc.message, detail=exc.detail),
    ) from exc


async def handle_http_exception(_: Request, exc: HTTPException) -> JSONResponse:
    # Routes already shaped the body; framework errors (404 route, 405) get wrapped.
    if isinstance(exc.detail, dict) and {"code", "message", "detail"} <= set(exc.detail):
        body = exc.detail
    else:
        body = error_body(code="HTTP_ERROR", message=str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)
