"""Componentes de UI para CLI (Rich).

Todo lo visual se imprime en stderr: stdout es solo para la respuesta JSON.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from core.domain.models import InResponse

_SUMMARY_FIELDS = ("target", "team", "pipelines")


def build_snapshot_table(response: InResponse) -> Table:
    """Tabla con los ficheros escritos (sale de la metadata de la respuesta)."""

    table = Table(title="Pipeline snapshot")
    table.add_column("File", style="cyan", no_wrap=True)
    table.add_column("URL", style="magenta")
    for field in response.metadata:
        if field.name in _SUMMARY_FIELDS:
            continue
        table.add_row(escape(field.name), escape(field.value))
    return table


def print_summary(console: Console, response: InResponse) -> None:
    values = {field.name: field.value for field in response.metadata}
    console.print(
        f"[bold]{escape(values.get('pipelines', '0'))}[/bold] pipelines from "
        f"[green]{escape(values.get('target', '?'))}[/green] (team {escape(values.get('team', '?'))})"
    )
    console.print(build_snapshot_table(response))
