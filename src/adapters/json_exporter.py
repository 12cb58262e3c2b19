"""Serialización JSON de la respuesta del recurso.

La respuesta viaja por stdout hacia el orquestador de CI, así que el formato
es estable: claves ordenadas y UTF-8 sin escapar.
"""

from __future__ import annotations

import json

from core.domain.models import InResponse


def render_response_json(response: InResponse) -> str:
    """Convierte `InResponse` al JSON que espera quien invoca el recurso."""

    payload = response.model_dump(mode="json")
    return json.dumps(payload, ensure_ascii=False, sort_keys=True)
