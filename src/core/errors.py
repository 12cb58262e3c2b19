"""Taxonomía de errores del recurso.

Reglas:
- Los adaptadores lanzan estas excepciones; el core nunca las envuelve.
- Los errores de escritura son el `OSError` original del sistema de ficheros.
"""

from __future__ import annotations

from enum import Enum


class ResourceError(Exception):
    """Base de todos los errores propios del recurso."""


class InvalidConfiguration(ResourceError):
    """La petición no es válida (p.ej. `insecure` no es un booleano)."""


class AuthenticationFailed(ResourceError):
    """El servidor rechazó el login."""


class VersionSyncFailed(ResourceError):
    """No se pudo sincronizar el cliente fly con el servidor."""


class ListingFailed(ResourceError):
    """La API no devolvió la lista de pipelines."""


class FetchFailed(ResourceError):
    """No se pudo obtener la configuración de un pipeline."""

    def __init__(self, message: str, *, pipeline: str | None = None) -> None:
        super().__init__(message)
        self.pipeline = pipeline


class FailureKind(str, Enum):
    INVALID_CONFIGURATION = "invalid_configuration"
    AUTHENTICATION_FAILED = "authentication_failed"
    VERSION_SYNC_FAILED = "version_sync_failed"
    LISTING_FAILED = "listing_failed"
    FETCH_FAILED = "fetch_failed"
    WRITE_FAILED = "write_failed"
    UNKNOWN = "unknown"


_KINDS: tuple[tuple[type[BaseException], FailureKind], ...] = (
    (InvalidConfiguration, FailureKind.INVALID_CONFIGURATION),
    (AuthenticationFailed, FailureKind.AUTHENTICATION_FAILED),
    (VersionSyncFailed, FailureKind.VERSION_SYNC_FAILED),
    (ListingFailed, FailureKind.LISTING_FAILED),
    (FetchFailed, FailureKind.FETCH_FAILED),
    (OSError, FailureKind.WRITE_FAILED),
)


def classify(exc: BaseException) -> FailureKind:
    """Clasifica una excepción según la taxonomía (para logs y salida)."""

    for exc_type, kind in _KINDS:
        if isinstance(exc, exc_type):
            return kind
    return FailureKind.UNKNOWN
