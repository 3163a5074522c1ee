"""CLI command: chunksource tail -- print events from a chunked stream."""

from __future__ import annotations

import dataclasses
import json
import sys
from typing import Any

import click

from chunksource._http import HttpxTransport
from chunksource.errors import ConfigurationError
from chunksource.source import ChunkedEventSource
from chunksource.types.config import RequestConfig
from chunksource.types.events import MessageEvent, ResponseHead, TransportResponse


def _make_transport() -> HttpxTransport:
    return HttpxTransport()


def _parse_headers(values: tuple[str, ...]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for value in values:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(
                f"expected 'Name: value', got {value!r}", param_hint="--header"
            )
        headers[name.strip().lower()] = content.strip()
    return headers


def _parse_data(data: str | None) -> Any:
    """Send JSON bodies as JSON, anything else verbatim."""
    if data is None:
        return None
    try:
        parsed = json.loads(data)
    except ValueError:
        return data
    return parsed if isinstance(parsed, (dict, list)) else data


@click.command()
@click.argument("url")
@click.option("-X", "--method", default="GET", help="HTTP method")
@click.option("-H", "--header", "headers", multiple=True, help="Request header 'Name: value'")
@click.option("-d", "--data", default=None, help="Request body (JSON is sent as JSON)")
@click.option("--timeout", default=60.0, type=float, help="Request timeout in seconds")
@click.option("--max-events", default=None, type=int, help="Stop after this many message events")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity")
@click.option("-q", "--quiet", is_flag=True, default=False, help="Only log errors")
def tail(
    url: str,
    method: str,
    headers: tuple[str, ...],
    data: str | None,
    timeout: float,
    max_events: int | None,
    verbose: int,
    quiet: bool,
) -> None:
    """Connect to URL and print every payload item as a JSON line.

    Lifecycle events (open, success, error) are reported on stderr.
    """
    from chunksource.cli.main import configure_logging

    configure_logging(verbose, quiet)

    parsed_headers = _parse_headers(headers)
    try:
        config = RequestConfig(
            url=url,
            method=method,
            data=_parse_data(data),
            timeout=timeout,
        )
        config = dataclasses.replace(config, headers={**config.headers, **parsed_headers})
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc

    transport = _make_transport()
    source = ChunkedEventSource(config, transport=transport, autoconnect=False)
    state = {"events": 0, "failed": False}

    def on_open(head: ResponseHead) -> None:
        click.echo(f"open: {head.status_code} {head.url}", err=True)

    def on_message(event: MessageEvent) -> None:
        for item in event.data:
            click.echo(json.dumps(item, ensure_ascii=False))
        state["events"] += 1
        if max_events is not None and state["events"] >= max_events:
            source.close()

    def on_success(response: TransportResponse) -> None:
        click.echo(
            f"success: {response.status_code} ({response.bytes_received} bytes)", err=True
        )

    def on_error(error: Exception) -> None:
        state["failed"] = True
        click.echo(f"error: {error}", err=True)

    source.add_listener("open", on_open)
    source.add_listener("message", on_message)
    source.add_listener("success", on_success)
    source.add_listener("error", on_error)

    try:
        source.connect()
        source.wait()
    except KeyboardInterrupt:
        source.close()
    finally:
        transport.close()

    if state["failed"]:
        sys.exit(1)
