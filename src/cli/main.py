"""CLI del recurso (Typer).

`pipeline-resource in DESTINATION` lee la petición JSON de stdin, escribe los
snapshots en DESTINATION e imprime la respuesta JSON en stdout. Logs, tablas
y errores van a stderr.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.concourse_api import ConcourseAPIClient
from adapters.fly_cli import FlyCLI
from adapters.json_exporter import render_response_json
from cli.doctor import run as doctor_command
from cli.ui_components import print_summary
from core.config import AppSettings
from core.domain.models import InRequest
from core.errors import InvalidConfiguration, classify
from core.log import configure_logging, get_logger, redact_secrets
from core.services.in_command import InCommand

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Snapshot pipeline configurations from a Concourse server.",
)
app.command("doctor")(doctor_command)

_stderr = Console(stderr=True)
logger = get_logger("cli")


def _format_validation_error(exc: ValidationError) -> str:
    # Sin `input`: la petición lleva contraseñas.
    parts = []
    for error in exc.errors(include_input=False, include_url=False):
        location = ".".join(str(part) for part in error.get("loc", ())) or "request"
        parts.append(f"{location}: {error.get('msg', 'invalid')}")
    return "; ".join(parts)


def parse_request(raw: str) -> InRequest:
    """Valida el JSON de stdin; cualquier problema es `InvalidConfiguration`."""

    if not raw.strip():
        raise InvalidConfiguration("empty request on stdin")
    try:
        return InRequest.model_validate_json(raw)
    except ValidationError as exc:
        raise InvalidConfiguration(f"invalid request: {_format_validation_error(exc)}") from exc


def _fail(exc: BaseException) -> typer.Exit:
    kind = classify(exc)
    logger.error("in failed [%s]: %s", kind.value, exc)
    return typer.Exit(1)


@app.command("in")
def in_command(
    destination: Annotated[
        Path,
        typer.Argument(help="Directory where pipeline configs are written."),
    ],
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Skip the summary table on stderr."),
    ] = False,
) -> None:
    """Fetch every pipeline config from the target and print the version JSON."""

    settings = AppSettings()
    configure_logging(settings.log_level, console=_stderr)

    raw = typer.get_text_stream("stdin").read()
    try:
        request = parse_request(raw)
    except InvalidConfiguration as exc:
        raise _fail(exc) from exc

    redact_secrets(request.source.secrets())

    try:
        destination.mkdir(parents=True, exist_ok=True)
        command = InCommand(
            fly=FlyCLI(settings),
            api=ConcourseAPIClient(settings),
            destination=destination,
            extension=settings.snapshot_extension,
        )
        response = command.run(request)
    except Exception as exc:  # noqa: BLE001
        raise _fail(exc) from exc

    typer.echo(render_response_json(response))
    if not quiet:
        print_summary(_stderr, response)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
