"""CLI (Typer + Rich): entrada por stdin, respuesta por stdout."""
