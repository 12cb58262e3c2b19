"""Modelos del dominio (Pydantic v2).

Describen el contrato del paso `in` del recurso: la petición que llega por
stdin, los pipelines que devuelve el servidor y la respuesta que se imprime
por stdout.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

# Versión opaca: nombre de pipeline -> token. Se devuelve tal cual.
Version = dict[str, str]


class Team(BaseModel):
    """Credenciales de un equipo en el servidor remoto."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Nombre del equipo (p.ej. 'main').",
    )
    username: str = Field(
        default="",
        description="Usuario para el login.",
    )
    password: str = Field(
        default="",
        description="Contraseña para el login.",
    )


class Source(BaseModel):
    """Configuración del recurso (`source` en la petición)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    target: str = Field(
        ...,
        min_length=1,
        description="URL del servidor de pipelines.",
    )
    teams: list[Team] = Field(
        default_factory=list,
        description="Equipos disponibles; el primero se usa para el login.",
    )
    insecure: str = Field(
        default="",
        description="Booleano como texto ('true'/'false'); vacío equivale a false.",
    )

    def primary_team(self) -> Team | None:
        return self.teams[0] if self.teams else None

    def secrets(self) -> list[str]:
        """Valores que nunca deben aparecer en logs."""

        out: list[str] = []
        for team in self.teams:
            for value in (team.password, team.username):
                if value and value not in out:
                    out.append(value)
        return out


class InRequest(BaseModel):
    """Petición inmutable del paso `in`."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    source: Source
    version: Version = Field(
        default_factory=dict,
        description="Última versión conocida; puede venir vacía en la primera ejecución.",
    )


class Session(BaseModel):
    """Contexto autenticado devuelto por `login`."""

    model_config = ConfigDict(frozen=True)

    target: str
    team: Team
    insecure: bool = False
    fly_target: str = Field(
        ...,
        min_length=1,
        description="Alias del target en la configuración local de fly.",
    )


class Pipeline(BaseModel):
    """Pipeline tal como lo lista la API."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., min_length=1)
    url: str = Field(
        default="",
        description="URL informativa del pipeline en la UI web.",
    )


class PipelineConfig(BaseModel):
    """Configuración cruda de un pipeline y su posición en el listado."""

    model_config = ConfigDict(frozen=True)

    pipeline: Pipeline
    index: int = Field(..., ge=0)
    payload: bytes


class MetadataField(BaseModel):
    name: str
    value: str


class InResponse(BaseModel):
    """Respuesta del paso `in` (se serializa a stdout)."""

    version: Version
    metadata: list[MetadataField] = Field(default_factory=list)
