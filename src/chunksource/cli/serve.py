"""CLI command: chunksource serve -- run the demo stream server."""

from __future__ import annotations

import json
from pathlib import Path

import click

from chunksource.demo import create_app


def _load_payloads(path: str) -> list[list]:
    try:
        payloads = json.loads(Path(path).read_text(encoding="utf-8"))
    except ValueError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="--payload-file") from exc
    if not isinstance(payloads, list) or not all(isinstance(p, list) for p in payloads):
        raise click.BadParameter(
            "expected a JSON list of arrays", param_hint="--payload-file"
        )
    return payloads


@click.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=5000, type=int, help="Port to bind to")
@click.option("--split", default=None, type=int, help="Chunk size in characters")
@click.option(
    "--payload-file",
    default=None,
    type=click.Path(exists=True),
    help="JSON file holding a list of arrays to stream",
)
@click.option("--debug/--no-debug", default=False, help="Enable debug mode")
def serve(host: str, port: int, split: int | None, payload_file: str | None, debug: bool) -> None:
    """Serve a demo stream at /stream that splits payloads across chunks."""
    payloads = _load_payloads(payload_file) if payload_file else None
    app = create_app(payloads=payloads, split=split)
    click.echo(f"Serving demo stream on http://{host}:{port}/stream")
    app.run(host=host, port=port, debug=debug)
