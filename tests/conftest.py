from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from core.domain.models import InRequest, Pipeline, Session, Source, Team


@dataclass
class FakeFly:
    """Doble en memoria de `FlyConnection` que registra cada llamada."""

    configs: dict[str, bytes] = field(default_factory=dict)
    login_error: Exception | None = None
    sync_error: Exception | None = None
    fetch_errors: dict[str, Exception] = field(default_factory=dict)
    calls: list[tuple] = field(default_factory=list)

    def login(self, target: str, team: Team, insecure: bool) -> Session:
        self.calls.append(("login", target, team.name, insecure))
        if self.login_error is not None:
            raise self.login_error
        return Session(target=target, team=team, insecure=insecure, fly_target="test-target")

    def sync(self, session: Session) -> None:
        self.calls.append(("sync", session.fly_target))
        if self.sync_error is not None:
            raise self.sync_error

    def get_pipeline_config(self, session: Session, name: str) -> bytes:
        self.calls.append(("get_pipeline_config", name))
        if name in self.fetch_errors:
            raise self.fetch_errors[name]
        return self.configs[name]

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)


@dataclass
class FakeAPI:
    pipelines: list[Pipeline] = field(default_factory=list)
    error: Exception | None = None
    sessions: list[Session] = field(default_factory=list)

    def list_pipelines(self, session: Session) -> list[Pipeline]:
        self.sessions.append(session)
        if self.error is not None:
            raise self.error
        return list(self.pipelines)


@pytest.fixture
def pipelines() -> list[Pipeline]:
    return [
        Pipeline(name="pipeline-1", url="pipeline_URL_1"),
        Pipeline(name="pipeline-2", url="pipeline_URL_2"),
    ]


@pytest.fixture
def fake_fly() -> FakeFly:
    return FakeFly(
        configs={
            "pipeline-1": b"---\npipeline1: foo\n",
            "pipeline-2": b"---\npipeline2: foo\n",
        }
    )


@pytest.fixture
def fake_api(pipelines: list[Pipeline]) -> FakeAPI:
    return FakeAPI(pipelines=pipelines)


@pytest.fixture
def source() -> Source:
    return Source(
        target="some target",
        teams=[Team(name="main", username="some user", password="some password")],
    )


@pytest.fixture
def in_request(source: Source) -> InRequest:
    return InRequest(source=source, version={"pipeline-1": "1234"})


@pytest.fixture
def download_dir(tmp_path: Path) -> Path:
    path = tmp_path / "download"
    path.mkdir()
    return path
