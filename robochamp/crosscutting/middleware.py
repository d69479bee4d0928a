"""
===============================================================================
MÓDULO: Middleware HTTP de contexto
===============================================================================

RequestContextMiddleware:
  - Aceptar el X-Request-Id del cliente (si es razonable) o generar uno.
  - Abrir el contexto del request para los logs y cerrarlo siempre.
  - Una línea de log por request con status, latencia y, si el request
    estaba autenticado, el user_id que dejó identity.bearer en request.state.

Colaboradores:
  - robochamp/context.py
  - crosscutting/logger.py
===============================================================================
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, set_request_context
from .logger import logger

REQUEST_ID_HEADER = "X-Request-Id"
_MAX_REQUEST_ID_LENGTH = 128


def _request_id_from(request: Request) -> str:
    incoming = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    if incoming and len(incoming) <= _MAX_REQUEST_ID_LENGTH and incoming.isprintable():
        return incoming
    return uuid.uuid4().hex


class RequestContextMiddleware(BaseHTTPMiddleware):
    _QUIET_PATHS = frozenset({"/healthz"})

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _request_id_from(request)
        request.state.request_id = request_id
        set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request falló")
            raise
        else:
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            if request.url.path not in self._QUIET_PATHS:
                extra: dict[str, object] = {
                    "status_code": status_code,
                    "latency_ms": round((time.perf_counter() - started) * 1000, 2),
                }
                user_id = getattr(request.state, "user_id", None)
                if user_id is not None:
                    extra["user_id"] = user_id
                logger.info("request completado", extra=extra)
            clear_context()
