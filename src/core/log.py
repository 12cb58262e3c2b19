"""Logging del recurso.

stdout está reservado para la respuesta JSON, así que todo el logging va a
stderr (Rich). Las credenciales de la petición se ocultan en cada registro.
"""

from __future__ import annotations

import logging
from typing import Iterable

from rich.console import Console
from rich.logging import RichHandler

REDACTED = "***"

_LOGGER_NAME = "pipeline_resource"
_CONFIGURED = False


class SecretRedactionFilter(logging.Filter):
    """Sustituye secretos conocidos por `***` en el mensaje ya formateado."""

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        self._secrets: list[str] = []
        self.add_secrets(secrets)

    def add_secrets(self, secrets: Iterable[str]) -> None:
        for secret in secrets:
            if secret and secret not in self._secrets:
                self._secrets.append(secret)
        # Los más largos primero: un secreto puede contener a otro.
        self._secrets.sort(key=len, reverse=True)

    def redact(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


_redaction = SecretRedactionFilter()


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger hijo del logger raíz del recurso."""

    if not name:
        return logging.getLogger(_LOGGER_NAME)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def redact_secrets(secrets: Iterable[str]) -> None:
    """Registra secretos que el filtro debe ocultar a partir de ahora."""

    _redaction.add_secrets(secrets)


def configure_logging(level: int | str = logging.INFO, *, console: Console | None = None) -> None:
    """Configura el logging del recurso una sola vez (llamadas extra solo ajustan el nivel)."""

    global _CONFIGURED
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    if _CONFIGURED:
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.addFilter(_redaction)
    logger.addHandler(handler)
    logger.propagate = False
    _CONFIGURED = True
