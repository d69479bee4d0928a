"""
===============================================================================
TARJETA CRC — robochamp/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Guardar request_id, método, path y el usuario autenticado del request en
    curso (ContextVars, seguros en async y en el threadpool de FastAPI).
  - Exponerlos al logger para que cada línea de un flujo de auth se pueda
    correlacionar sin pasar parámetros por los casos de uso.

Colaboradores:
  - crosscutting.middleware: abre y cierra el contexto por request.
  - identity.bearer: bind_user() cuando el access token es válido.
  - crosscutting.logger: get_context_dict().
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Optional

_request_id: ContextVar[str] = ContextVar("robochamp_request_id", default="")
_method: ContextVar[str] = ContextVar("robochamp_method", default="")
_path: ContextVar[str] = ContextVar("robochamp_path", default="")
_user_id: ContextVar[Optional[int]] = ContextVar("robochamp_user_id", default=None)


def set_request_context(*, request_id: str, method: str = "", path: str = "") -> None:
    _request_id.set(request_id)
    _method.set(method)
    _path.set(path)
    _user_id.set(None)


def bind_user(user_id: int) -> None:
    """Asocia el usuario autenticado al request actual."""
    _user_id.set(user_id)


def get_context_dict() -> dict[str, object]:
    """Contexto actual para el log; las claves sin valor se omiten."""
    ctx: dict[str, object] = {
        "request_id": _request_id.get(),
        "method": _method.get(),
        "path": _path.get(),
    }
    user_id = _user_id.get()
    if user_id is not None:
        ctx["user_id"] = user_id
    return {key: value for key, value in ctx.items() if value not in ("", None)}


def clear_context() -> None:
    for var in (_request_id, _method, _path):
        var.set("")
    _user_id.set(None)
