"""
===============================================================================
MÓDULO: Logger estructurado (JSON) con contexto de request
===============================================================================

Una línea JSON por evento, con el contexto del request (request_id, método,
path, user_id) y los `extra` del caller.

Reglas de seguridad:
  - Cualquier `extra` cuya clave suene a secreto (password, *token*, *secret*,
    *_hash, authorization, api_key) se reemplaza por REDACTED, sin importar
    el nivel de anidamiento.
  - Los valores largos se recortan; bytes nunca se vuelcan.

Colaboradores:
  - robochamp/context.py (get_context_dict)
  - crosscutting/config.py (log_level, log_json)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

REDACTED = "***REDACTADO***"

# Atributos estándar de LogRecord: no se copian al payload como extra.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}

_SENSITIVE_EXACT = frozenset({"password", "authorization", "api_key", "secret"})
_SENSITIVE_FRAGMENTS = ("password", "token", "secret", "_hash", "api_key")

_MAX_STR = 4_000
_MAX_DEPTH = 4


def is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return lowered in _SENSITIVE_EXACT or any(
        fragment in lowered for fragment in _SENSITIVE_FRAGMENTS
    )


def sanitize(value: Any, *, key: str | None = None, depth: int = 0) -> Any:
    """Devuelve una versión serializable y redactada de `value`."""
    if key is not None and is_sensitive_key(key):
        return REDACTED
    if depth > _MAX_DEPTH:
        return "***TRUNCADO***"
    if isinstance(value, str):
        return value if len(value) <= _MAX_STR else value[:_MAX_STR] + "…(truncado)"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes {len(value)}B>"
    if isinstance(value, dict):
        return {str(k): sanitize(v, key=str(k), depth=depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [sanitize(v, key=key, depth=depth + 1) for v in value]
    if isinstance(value, (int, float, bool)) or value is None:
        return value
    return str(value)


class JSONFormatter(logging.Formatter):
    """LogRecord -> JSON (contexto del request + extras redactados)."""

    def format(self, record: logging.LogRecord) -> str:
        from ..context import get_context_dict

        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
            **get_context_dict(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                payload[key] = sanitize(value, key=key)

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, tb = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "stacktrace": traceback.format_exception(exc_type, exc, tb),
            }

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logger(name: str = "robochamp") -> logging.Logger:
    """
    Configura el logger raíz del paquete (idempotente).

    Si Settings no valida todavía, arranca con INFO + JSON; el error real se
    reporta cuando la app llama a get_settings().
    """
    log = logging.getLogger(name)

    level, use_json = "INFO", True
    try:
        from .config import get_settings

        settings = get_settings()
        level, use_json = (settings.log_level or "INFO").upper(), settings.log_json
    except ValueError:
        log.debug("Settings inválidos al configurar el logger; usando defaults")

    log.setLevel(getattr(logging, level, logging.INFO))
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)
    return log


logger = setup_logger()
