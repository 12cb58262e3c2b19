"""Contrato de la API HTTP del servidor de pipelines."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Pipeline, Session


@runtime_checkable
class PipelineAPI(Protocol):
    def list_pipelines(self, session: Session) -> list[Pipeline]:
        """Lista los pipelines del equipo de la sesión, en el orden del servidor."""

        ...
