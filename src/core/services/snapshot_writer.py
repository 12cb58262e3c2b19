"""Escritura de snapshots de pipelines en el directorio destino.

Nombres: `<índice con ceros>-<nombre>.<ext>`. El índice es la posición del
pipeline en el listado del servidor, así que el orden lexicográfico del
directorio reproduce el orden de descarga.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from core.domain.models import PipelineConfig

DEFAULT_EXTENSION = "yml"
MIN_INDEX_WIDTH = 4


def index_width(total: int) -> int:
    """Ancho del prefijo numérico para `total` pipelines."""

    return max(MIN_INDEX_WIDTH, len(str(max(total - 1, 0))))


def snapshot_filename(
    index: int,
    name: str,
    *,
    width: int = MIN_INDEX_WIDTH,
    extension: str = DEFAULT_EXTENSION,
) -> str:
    if index < 0:
        raise ValueError(f"index must be >= 0, got {index}")
    return f"{index:0{width}d}-{name}.{extension}"


def write_snapshot(
    *,
    destination: Path,
    config: PipelineConfig,
    width: int = MIN_INDEX_WIDTH,
    extension: str = DEFAULT_EXTENSION,
) -> Path:
    """Escribe `config.payload` de forma atómica y devuelve la ruta final.

    El contenido se vuelca a un temporal en el mismo directorio y luego se
    renombra, así nunca hay un fichero final a medio escribir. Cualquier
    `OSError` se propaga tal cual.
    """

    final_path = destination / snapshot_filename(
        config.index,
        config.pipeline.name,
        width=width,
        extension=extension,
    )

    fd, tmp_name = tempfile.mkstemp(dir=destination, prefix=".tmp-", suffix=f".{extension}")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(config.payload)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, final_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return final_path
