"""Paso `in` del recurso: snapshot de las configuraciones de pipelines.

Flujo (estrictamente secuencial, falla al primer error):

    login -> sync -> listado -> (get-pipeline[i] -> escritura[i])* -> respuesta

Las excepciones de los colaboradores se propagan sin envolver: quien llama
recibe exactamente el mismo objeto que lanzó el adaptador. Los ficheros ya
escritos antes de un fallo se quedan en disco.
"""

from __future__ import annotations

from pathlib import Path

from core.domain.models import (
    InRequest,
    InResponse,
    MetadataField,
    Pipeline,
    PipelineConfig,
    Session,
    Source,
)
from core.errors import InvalidConfiguration
from core.interfaces import FlyConnection, PipelineAPI
from core.log import get_logger
from core.services.snapshot_writer import DEFAULT_EXTENSION, index_width, write_snapshot

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})

logger = get_logger(__name__)


def parse_insecure(value: str | None) -> bool:
    """Convierte el flag `insecure` (texto) en booleano.

    Vacío (o ausente) equivale a False. Cualquier otra cadena que no sea una
    grafía booleana aceptada lanza `InvalidConfiguration`.
    """

    if not value:
        return False
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise InvalidConfiguration(f"invalid value for insecure: {value!r} (expected a boolean)")


def validate_source(source: Source) -> bool:
    """Valida la fuente sin tocar red ni procesos; devuelve `insecure` ya parseado."""

    insecure = parse_insecure(source.insecure)
    if source.primary_team() is None:
        raise InvalidConfiguration("at least one team must be configured")
    return insecure


def build_response(
    request: InRequest,
    pipelines: list[Pipeline],
    written: list[Path],
) -> InResponse:
    """Ensambla la respuesta: eco exacto de la versión + metadata descriptiva."""

    team = request.source.primary_team()
    metadata = [
        MetadataField(name="target", value=request.source.target),
        MetadataField(name="team", value=team.name if team else ""),
        MetadataField(name="pipelines", value=str(len(pipelines))),
    ]
    metadata.extend(
        MetadataField(name=path.name, value=pipeline.url)
        for pipeline, path in zip(pipelines, written)
    )
    return InResponse(version=request.version, metadata=metadata)


class InCommand:
    """Orquesta un `in` completo contra un servidor.

    Los colaboradores llegan por constructor (`FlyConnection`, `PipelineAPI`)
    para poder sustituirlos por dobles en tests.
    """

    def __init__(
        self,
        *,
        fly: FlyConnection,
        api: PipelineAPI,
        destination: Path,
        extension: str = DEFAULT_EXTENSION,
    ) -> None:
        self._fly = fly
        self._api = api
        self._destination = destination
        self._extension = extension

    def authenticate(self, source: Source) -> Session:
        insecure = validate_source(source)
        team = source.primary_team()
        assert team is not None

        logger.info("logging in to %s as team %s", source.target, team.name)
        session = self._fly.login(source.target, team, insecure)

        logger.info("syncing fly with %s", source.target)
        self._fly.sync(session)
        return session

    def list_pipelines(self, session: Session) -> list[Pipeline]:
        pipelines = list(self._api.list_pipelines(session))
        logger.info("found %d pipelines", len(pipelines))
        return pipelines

    def snapshot(self, session: Session, pipelines: list[Pipeline]) -> list[Path]:
        """Descarga y escribe cada pipeline en el orden del listado."""

        width = index_width(len(pipelines))
        written: list[Path] = []
        for index, pipeline in enumerate(pipelines):
            logger.debug("getting pipeline %d: %s", index, pipeline.name)
            payload = self._fly.get_pipeline_config(session, pipeline.name)
            config = PipelineConfig(pipeline=pipeline, index=index, payload=payload)
            path = write_snapshot(
                destination=self._destination,
                config=config,
                width=width,
                extension=self._extension,
            )
            logger.info("wrote %s (%d bytes)", path.name, len(payload))
            written.append(path)
        return written

    def run(self, request: InRequest) -> InResponse:
        session = self.authenticate(request.source)
        pipelines = self.list_pipelines(session)
        written = self.snapshot(session, pipelines)
        return build_response(request, pipelines, written)
