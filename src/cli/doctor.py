"""Doctor command for environment diagnostics."""

from __future__ import annotations

import subprocess
from typing import Annotated

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.fly_cli import FlyCLI
from adapters.http_client import build_client
from core.config import AppSettings

app = typer.Typer(help="Environment diagnostics and configuration checks.")

_console = Console(stderr=True)


def _check_fly(settings: AppSettings) -> tuple[bool, str]:
    try:
        return True, FlyCLI(settings).version() or "OK"
    except (OSError, subprocess.SubprocessError) as exc:
        return False, str(exc)


def _check_target(settings: AppSettings, target: str, insecure: bool) -> tuple[bool, str]:
    """GET /api/v1/info: no requiere autenticación."""

    try:
        with build_client(settings, base_url=target.rstrip("/"), insecure=insecure) as client:
            response = client.get("/api/v1/info")
        response.raise_for_status()
        info = response.json()
        version = info.get("version") if isinstance(info, dict) else None
        return True, f"HTTP {response.status_code}" + (f", server {version}" if version else "")
    except (httpx.HTTPError, ValueError) as exc:
        return False, str(exc)


@app.command()
def run(
    target: Annotated[
        str | None,
        typer.Option("--target", "-c", help="Server URL to probe (optional)."),
    ] = None,
    insecure: Annotated[
        bool,
        typer.Option("--insecure", "-k", help="Skip TLS verification when probing."),
    ] = False,
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="pipeline-resource doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("fly binary", "OK", settings.fly_binary_path)
    table.add_row("fly target alias", "OK", settings.fly_target_alias)
    table.add_row("Snapshot extension", "OK", f".{settings.snapshot_extension}")

    ok_fly, detail_fly = _check_fly(settings)
    table.add_row("fly version", "OK" if ok_fly else "FAIL", detail_fly)

    ok_target = True
    if target:
        ok_target, detail_target = _check_target(settings, target, insecure)
        table.add_row("Target", "OK" if ok_target else "FAIL", detail_target)
    else:
        table.add_row("Target", "SKIPPED", "Pass --target to probe the server")

    _console.print(table)

    if not ok_fly:
        _console.print(
            "\n[yellow]Note:[/yellow] set PIPELINE_RESOURCE_FLY_BINARY_PATH to the fly executable."
        )
    if not (ok_fly and ok_target):
        raise typer.Exit(1)
