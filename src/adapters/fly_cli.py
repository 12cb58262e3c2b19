"""Adaptador del binario `fly` (CLI de Concourse).

Implementa `core.interfaces.FlyConnection` ejecutando fly con `subprocess.run`:

- `fly -t <alias> login -c <target> -n <team> -u <user> -p <pass> [-k]`
- `fly -t <alias> sync`
- `fly -t <alias> get-pipeline -p <name>`

Un código de salida distinto de cero se traduce al error de la taxonomía
correspondiente, con el stderr de fly como mensaje.
"""

from __future__ import annotations

import subprocess
from typing import Sequence

from core.config import AppSettings
from core.domain.models import Session, Team
from core.errors import AuthenticationFailed, FetchFailed, ResourceError, VersionSyncFailed
from core.log import get_logger

logger = get_logger(__name__)


def _describe_failure(args: Sequence[str], result: subprocess.CompletedProcess[bytes]) -> str:
    stderr = (result.stderr or b"").decode("utf-8", errors="replace").strip()
    stdout = (result.stdout or b"").decode("utf-8", errors="replace").strip()
    detail = stderr or stdout or "no output"
    return f"fly {args[0]} exited with status {result.returncode}: {detail}"


class FlyCLI:
    """Ejecuta fly contra un alias de target fijo."""

    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()

    @property
    def binary(self) -> str:
        return self._settings.fly_binary_path

    def _run(
        self,
        alias: str,
        args: Sequence[str],
        *,
        error_cls: type[ResourceError],
    ) -> bytes:
        command = [self.binary, "-t", alias, *args]
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                check=False,
                timeout=self._settings.fly_timeout_seconds,
            )
        except subprocess.TimeoutExpired as exc:
            raise error_cls(f"fly {args[0]} timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise error_cls(f"could not run {self.binary}: {exc}") from exc

        if result.returncode != 0:
            raise error_cls(_describe_failure(args, result))
        return result.stdout or b""

    def version(self) -> str:
        """Versión del binario (`fly --version`); usado por `doctor`."""

        result = subprocess.run(
            [self.binary, "--version"],
            capture_output=True,
            check=True,
            timeout=self._settings.fly_timeout_seconds,
        )
        return result.stdout.decode("utf-8", errors="replace").strip()

    def login(self, target: str, team: Team, insecure: bool) -> Session:
        alias = self._settings.fly_target_alias
        args = [
            "login",
            "-c", target,
            "-n", team.name,
            "-u", team.username,
            "-p", team.password,
        ]
        if insecure:
            args.append("-k")
        self._run(alias, args, error_cls=AuthenticationFailed)
        logger.debug("fly logged in to %s (alias %s)", target, alias)
        return Session(target=target, team=team, insecure=insecure, fly_target=alias)

    def sync(self, session: Session) -> None:
        self._run(session.fly_target, ["sync"], error_cls=VersionSyncFailed)

    def get_pipeline_config(self, session: Session, name: str) -> bytes:
        try:
            return self._run(session.fly_target, ["get-pipeline", "-p", name], error_cls=FetchFailed)
        except FetchFailed as exc:
            exc.pipeline = name
            raise
