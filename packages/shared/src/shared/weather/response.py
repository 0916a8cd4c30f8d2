from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.weather.errors import LookupFailure


def error_response(message: str) -> dict[str, str]:
    return {"error": message}


async def handle_lookup_failure(_: Request, exc: LookupFailure) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_response(exc.message))


async def handle_http_exception(_: Request, exc: StarletteHTTPException) -> Response:
    # Unknown paths answer with a bare status and no body.
    if exc.status_code == 404:
        return Response(status_code=404)
    return JSONResponse(status_code=exc.status_code, content=error_response(str(exc.detail)))
