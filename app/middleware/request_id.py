"""Per-request id binding for structured logs.

Echoes a client-supplied ``X-Request-ID`` (or generates one) and binds it
into ``structlog.contextvars`` so every log line emitted while handling the
request carries ``request_id``.
"""

import uuid

import structlog
from fastapi import FastAPI, Request

REQUEST_ID_HEADER = "X-Request-ID"


def setup_request_id_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def bind_request_id(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
