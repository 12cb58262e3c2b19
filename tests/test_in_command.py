"""Tests for the `in` orchestration (auth -> list -> fetch/write -> response)."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.domain.models import InRequest, Pipeline, Source, Team
from core.errors import (
    AuthenticationFailed,
    FetchFailed,
    InvalidConfiguration,
    ListingFailed,
    VersionSyncFailed,
)
from core.services.in_command import InCommand, build_response, parse_insecure

from conftest import FakeAPI, FakeFly


def _command(fly: FakeFly, api: FakeAPI, destination: Path) -> InCommand:
    return InCommand(fly=fly, api=api, destination=destination)


def _with_insecure(request: InRequest, insecure: str) -> InRequest:
    source = request.source.model_copy(update={"insecure": insecure})
    return request.model_copy(update={"source": source})


class TestParseInsecure:
    @pytest.mark.parametrize("value", ["1", "t", "T", "TRUE", "true", "True"])
    def test_true_spellings(self, value: str) -> None:
        assert parse_insecure(value) is True

    @pytest.mark.parametrize("value", ["", None, "0", "f", "F", "FALSE", "false", "False"])
    def test_false_spellings(self, value: str | None) -> None:
        assert parse_insecure(value) is False

    @pytest.mark.parametrize("value", ["unparsable", "yes", "tRuE", " true", "2"])
    def test_rejects_other_values(self, value: str) -> None:
        with pytest.raises(InvalidConfiguration):
            parse_insecure(value)


class TestRun:
    def test_downloads_all_pipeline_configs(
        self,
        fake_fly: FakeFly,
        fake_api: FakeAPI,
        in_request: InRequest,
        download_dir: Path,
    ) -> None:
        _command(fake_fly, fake_api, download_dir).run(in_request)

        files = sorted(p.name for p in download_dir.iterdir())
        assert files == ["0000-pipeline-1.yml", "0001-pipeline-2.yml"]
        assert (download_dir / files[0]).read_bytes() == b"---\npipeline1: foo\n"
        assert (download_dir / files[1]).read_bytes() == b"---\npipeline2: foo\n"

    def test_returns_provided_version(
        self,
        fake_fly: FakeFly,
        fake_api: FakeAPI,
        in_request: InRequest,
        download_dir: Path,
    ) -> None:
        response = _command(fake_fly, fake_api, download_dir).run(in_request)

        assert response.version == {"pipeline-1": "1234"}
        assert response.version == in_request.version

    def test_echoes_empty_version(
        self,
        fake_fly: FakeFly,
        fake_api: FakeAPI,
        source: Source,
        download_dir: Path,
    ) -> None:
        response = _command(fake_fly, fake_api, download_dir).run(InRequest(source=source))
        assert response.version == {}

    def test_returns_metadata(
        self,
        fake_fly: FakeFly,
        fake_api: FakeAPI,
        in_request: InRequest,
        download_dir: Path,
    ) -> None:
        response = _command(fake_fly, fake_api, download_dir).run(in_request)

        assert response.metadata
        names = [field.name for field in response.metadata]
        assert "target" in names
        assert "pipelines" in names

    def test_syncs_fly_once_after_login(
        self,
        fake_fly: FakeFly,
        fake_api: FakeAPI,
        in_request: InRequest,
        download_dir: Path,
    ) -> None:
        _command(fake_fly, fake_api, download_dir).run(in_request)

        assert fake_fly.count("login") == 1
        assert fake_fly.count("sync") == 1
        assert [call[0] for call in fake_fly.calls[:2]] == ["login", "sync"]

    def test_fetches_in_listing_order(
        self,
        fake_fly: FakeFly,
        in_request: InRequest,
        download_dir: Path,
    ) -> None:
        listed = [
            Pipeline(name="zeta", url="u1"),
            Pipeline(name="alpha", url="u2"),
            Pipeline(name="mid", url="u3"),
        ]
        fake_fly.configs = {p.name: p.name.encode() for p in listed}

        _command(fake_fly, FakeAPI(pipelines=listed), download_dir).run(in_request)

        fetched = [call[1] for call in fake_fly.calls if call[0] == "get_pipeline_config"]
        assert fetched == ["zeta", "alpha", "mid"]
        files = sorted(p.name for p in download_dir.iterdir())
        assert files == ["0000-zeta.yml", "0001-alpha.yml", "0002-mid.yml"]

    def test_duplicate_names_do_not_collide(
        self,
        fake_fly: FakeFly,
        in_request: InRequest,
        download_dir: Path,
    ) -> None:
        listed = [Pipeline(name="same"), Pipeline(name="same")]
        fake_fly.configs = {"same": b"x: 1\n"}

        _command(fake_fly, FakeAPI(pipelines=listed), download_dir).run(in_request)

        assert sorted(p.name for p in download_dir.iterdir()) == ["0000-same.yml", "0001-same.yml"]

    def test_no_pipelines_writes_nothing(
        self,
        fake_fly: FakeFly,
        in_request: InRequest,
        download_dir: Path,
    ) -> None:
        response = _command(fake_fly, FakeAPI(), download_dir).run(in_request)

        assert list(download_dir.iterdir()) == []
        assert response.version == in_request.version
        assert response.metadata


class TestInsecure:
    def test_login_receives_insecure_true(
        self,
        fake_fly: FakeFly,
        fake_api: FakeAPI,
        in_request: InRequest,
        download_dir: Path,
    ) -> None:
        _command(fake_fly, fake_api, download_dir).run(_with_insecure(in_request, "true"))

        assert fake_fly.count("login") == 1
        assert fake_fly.calls[0] == ("login", "some target", "main", True)

    def test_unparsable_insecure_fails_before_any_call(
        self,
        fake_fly: FakeFly,
        fake_api: FakeAPI,
        in_request: InRequest,
        download_dir: Path,
    ) -> None:
        with pytest.raises(InvalidConfiguration):
            _command(fake_fly, fake_api, download_dir).run(_with_insecure(in_request, "unparsable"))

        assert fake_fly.calls == []
        assert fake_api.sessions == []
        assert list(download_dir.iterdir()) == []

    def test_missing_teams_fails_before_any_call(
        self,
        fake_fly: FakeFly,
        fake_api: FakeAPI,
        download_dir: Path,
    ) -> None:
        request = InRequest(source=Source(target="some target", teams=[]))

        with pytest.raises(InvalidConfiguration):
            _command(fake_fly, fake_api, download_dir).run(request)

        assert fake_fly.calls == []


class TestErrors:
    def test_login_error_is_returned_unchanged(
        self,
        fake_fly: FakeFly,
        fake_api: FakeAPI,
        in_request: InRequest,
        download_dir: Path,
    ) -> None:
        expected = AuthenticationFailed("login failed")
        fake_fly.login_error = expected

        with pytest.raises(AuthenticationFailed) as excinfo:
            _command(fake_fly, fake_api, download_dir).run(in_request)

        assert excinfo.value is expected
        assert list(download_dir.iterdir()) == []
        assert fake_fly.count("sync") == 0

    def test_sync_error_aborts_run(
        self,
        fake_fly: FakeFly,
        fake_api: FakeAPI,
        in_request: InRequest,
        download_dir: Path,
    ) -> None:
        expected = VersionSyncFailed("sync failed")
        fake_fly.sync_error = expected

        with pytest.raises(VersionSyncFailed) as excinfo:
            _command(fake_fly, fake_api, download_dir).run(in_request)

        assert excinfo.value is expected
        assert fake_api.sessions == []

    def test_listing_error_is_returned_unchanged(
        self,
        fake_fly: FakeFly,
        in_request: InRequest,
        download_dir: Path,
    ) -> None:
        expected = ListingFailed("some error")

        with pytest.raises(ListingFailed) as excinfo:
            _command(fake_fly, FakeAPI(error=expected), download_dir).run(in_request)

        assert excinfo.value is expected
        assert fake_fly.count("get_pipeline_config") == 0

    @pytest.mark.parametrize("failing_index", [0, 1, 2])
    def test_fetch_error_stops_after_k_files(
        self,
        fake_fly: FakeFly,
        in_request: InRequest,
        download_dir: Path,
        failing_index: int,
    ) -> None:
        listed = [Pipeline(name=f"p{i}") for i in range(3)]
        fake_fly.configs = {p.name: f"p: {i}\n".encode() for i, p in enumerate(listed)}
        expected = FetchFailed("some error")
        fake_fly.fetch_errors = {listed[failing_index].name: expected}

        with pytest.raises(FetchFailed) as excinfo:
            _command(fake_fly, FakeAPI(pipelines=listed), download_dir).run(in_request)

        assert excinfo.value is expected
        files = sorted(p.name for p in download_dir.iterdir())
        assert files == [f"{i:04d}-p{i}.yml" for i in range(failing_index)]
        assert fake_fly.count("get_pipeline_config") == failing_index + 1

    def test_filesystem_error_propagates(
        self,
        fake_fly: FakeFly,
        fake_api: FakeAPI,
        in_request: InRequest,
        tmp_path: Path,
    ) -> None:
        missing = tmp_path / "does-not-exist"

        with pytest.raises(OSError):
            _command(fake_fly, fake_api, missing).run(in_request)


def test_build_response_is_independent_of_content() -> None:
    request = InRequest(
        source=Source(target="t", teams=[Team(name="main")]),
        version={"a": "1", "b": "2"},
    )
    response = build_response(request, [], [])

    assert response.version == {"a": "1", "b": "2"}
    assert {field.name for field in response.metadata} >= {"target", "team", "pipelines"}
