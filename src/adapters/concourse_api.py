"""Cliente de la API HTTP de Concourse (listado de pipelines).

Implementa `core.interfaces.PipelineAPI`:
- Obtiene un token con el grant `password` del emisor OAuth del servidor
  (`/sky/issuer/token`, mismo cliente público que usa fly).
- Lista `GET /api/v1/teams/<team>/pipelines` respetando el orden del servidor.

Cualquier fallo HTTP o de transporte se traduce a `ListingFailed`.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from adapters.http_client import build_client
from core.config import AppSettings
from core.domain.models import Pipeline, Session
from core.errors import ListingFailed
from core.log import get_logger

TOKEN_PATH = "/sky/issuer/token"
# Credenciales públicas del cliente OAuth de fly (no son secretas).
FLY_CLIENT_ID = "fly"
FLY_CLIENT_SECRET = "Zmx5"
TOKEN_SCOPE = "openid profile email federated:id groups"

logger = get_logger(__name__)


def pipeline_web_url(target: str, team: str, name: str) -> str:
    return f"{target.rstrip('/')}/teams/{quote(team, safe='')}/pipelines/{quote(name, safe='')}"


class ConcourseAPIClient:
    """Cliente síncrono; un token por sesión y por ejecución (sin caché en disco)."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    def _client(self, session: Session) -> httpx.Client:
        return build_client(
            self._settings,
            base_url=session.target.rstrip("/"),
            insecure=session.insecure,
            transport=self._transport,
        )

    def _fetch_token(self, client: httpx.Client, session: Session) -> str:
        response = client.post(
            TOKEN_PATH,
            data={
                "grant_type": "password",
                "username": session.team.username,
                "password": session.team.password,
                "scope": TOKEN_SCOPE,
            },
            auth=(FLY_CLIENT_ID, FLY_CLIENT_SECRET),
        )
        response.raise_for_status()
        payload = response.json()
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise ListingFailed("token endpoint did not return an access_token")
        return token

    def list_pipelines(self, session: Session) -> list[Pipeline]:
        team = session.team.name
        path = f"/api/v1/teams/{quote(team, safe='')}/pipelines"
        try:
            with self._client(session) as client:
                token = self._fetch_token(client, session)
                response = client.get(path, headers={"Authorization": f"Bearer {token}"})
                response.raise_for_status()
                payload: Any = response.json()
        except httpx.HTTPStatusError as exc:
            raise ListingFailed(
                f"listing pipelines for team {team} failed: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ListingFailed(f"listing pipelines for team {team} failed: {exc}") from exc
        except ValueError as exc:
            raise ListingFailed(f"invalid JSON listing pipelines for team {team}") from exc

        if not isinstance(payload, list):
            raise ListingFailed(f"unexpected pipelines payload for team {team}")

        pipelines: list[Pipeline] = []
        for item in payload:
            if not isinstance(item, dict) or not isinstance(item.get("name"), str):
                raise ListingFailed(f"unexpected pipeline entry for team {team}: {item!r}")
            name = item["name"]
            pipelines.append(
                Pipeline(name=name, url=pipeline_web_url(session.target, team, name))
            )
        logger.debug("api returned %d pipelines for team %s", len(pipelines), team)
        return pipelines
