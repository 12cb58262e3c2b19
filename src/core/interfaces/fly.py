"""Contrato del cliente de línea de comandos (fly).

Protocol estructural: cualquier objeto con estos tres métodos sirve, sea el
adaptador real sobre `subprocess` o un doble en memoria.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Session, Team


@runtime_checkable
class FlyConnection(Protocol):
    """Operaciones de fly que necesita el paso `in`.

    Reglas:
    - Los fallos se lanzan como excepciones de `core.errors`.
    - Ninguna operación reintenta ni cachea.
    """

    def login(self, target: str, team: Team, insecure: bool) -> Session:
        """Autentica contra `target` y devuelve la sesión establecida."""

        ...

    def sync(self, session: Session) -> None:
        """Alinea la versión local de fly con la del servidor."""

        ...

    def get_pipeline_config(self, session: Session, name: str) -> bytes:
        """Devuelve la configuración del pipeline `name` como bytes crudos."""

        ...
