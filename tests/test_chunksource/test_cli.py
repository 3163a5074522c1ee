"""Tests for the chunksource CLI commands."""
from __future__ import annotations

import json

import httpx
import pytest
from click.testing import CliRunner
from flask import Flask

from chunksource import __version__
from chunksource._http import HttpxTransport
from chunksource.cli import tail as tail_module
from chunksource.cli.main import cli


def _mock_transport(handler, seen: list | None = None):
    def factory() -> HttpxTransport:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        if seen is not None:
            seen.append(client)
        return HttpxTransport(client=client)

    return factory


def _stream(*chunks: bytes, status_code: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=iter(chunks))

    return handler


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


class TestCLIGroup:
    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "tail" in result.output
        assert "serve" in result.output

    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


# ---------------------------------------------------------------------------
# tail command
# ---------------------------------------------------------------------------


class TestTailCommand:
    def test_prints_items_as_json_lines(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            tail_module,
            "_make_transport",
            _mock_transport(_stream(b'data:[{"id": 1}, 0', b', "x"]\ndata:[2]\n')),
        )
        result = CliRunner().invoke(cli, ["tail", "https://stream.test/events"])
        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == ['{"id": 1}', '"x"', "2"]
        assert "open: 200 https://stream.test/events" in result.stderr
        assert "success: 200" in result.stderr

    def test_sends_method_headers_and_json_body(self, monkeypatch: pytest.MonkeyPatch) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, content=b"data:[1]\n")

        monkeypatch.setattr(tail_module, "_make_transport", _mock_transport(handler))
        result = CliRunner().invoke(
            cli,
            [
                "tail",
                "https://stream.test/events",
                "-X",
                "post",
                "-H",
                "X-Token: abc",
                "-d",
                '{"q": "hi"}',
            ],
        )
        assert result.exit_code == 0, result.output
        request = captured[0]
        assert request.method == "POST"
        assert request.headers["x-token"] == "abc"
        assert json.loads(request.content) == {"q": "hi"}

    @pytest.mark.parametrize(
        "extra, expected",
        [([], "application/json"), (["-H", "Content-Type: text/plain"], "text/plain")],
    )
    def test_headers_merge_over_config_default(
        self, monkeypatch: pytest.MonkeyPatch, extra: list[str], expected: str
    ) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, content=b"data:[1]\n")

        monkeypatch.setattr(tail_module, "_make_transport", _mock_transport(handler))
        result = CliRunner().invoke(cli, ["tail", "https://stream.test/events", *extra])
        assert result.exit_code == 0, result.output
        assert captured[0].headers["content-type"] == expected

    def test_http_error_exits_nonzero(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            tail_module,
            "_make_transport",
            _mock_transport(_stream(b"nope", status_code=404)),
        )
        result = CliRunner().invoke(cli, ["tail", "https://stream.test/missing"])
        assert result.exit_code == 1
        assert "error:" in result.stderr
        assert "open:" not in result.stderr

    def test_max_events_stops_early(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            tail_module,
            "_make_transport",
            _mock_transport(_stream(b"data:[1]\n", b"data:[2]\n", b"data:[3]\n")),
        )
        result = CliRunner().invoke(
            cli, ["tail", "https://stream.test/events", "--max-events", "1"]
        )
        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == ["1"]
        assert "success:" not in result.stderr

    def test_bad_header_is_rejected(self) -> None:
        result = CliRunner().invoke(
            cli, ["tail", "https://stream.test/events", "-H", "no-colon"]
        )
        assert result.exit_code == 2
        assert "Name: value" in result.output

    def test_bad_method_is_a_usage_error(self) -> None:
        result = CliRunner().invoke(
            cli, ["tail", "https://stream.test/events", "-X", "FETCH"]
        )
        assert result.exit_code == 2

    def test_injected_client_is_left_open(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[httpx.Client] = []
        monkeypatch.setattr(
            tail_module, "_make_transport", _mock_transport(_stream(b"[1]\n"), seen)
        )
        CliRunner().invoke(cli, ["tail", "https://stream.test/events"])
        # The transport does not own an injected client.
        assert seen and not seen[0].is_closed


class TestParseHelpers:
    def test_parse_headers_starts_empty(self) -> None:
        assert tail_module._parse_headers(()) == {}

    def test_parse_headers_lowercases_names(self) -> None:
        headers = tail_module._parse_headers(("Content-Type: text/plain", "X-A:b"))
        assert headers == {"content-type": "text/plain", "x-a": "b"}

    @pytest.mark.parametrize(
        "raw, expected",
        [(None, None), ('{"a": 1}', {"a": 1}), ("[1]", [1]), ("42", "42"), ("plain", "plain")],
    )
    def test_parse_data(self, raw, expected) -> None:
        assert tail_module._parse_data(raw) == expected


# ---------------------------------------------------------------------------
# serve command
# ---------------------------------------------------------------------------


class TestServeCommand:
    def test_serve_runs_app(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[dict] = []

        def fake_run(self, **kwargs) -> None:
            calls.append(kwargs)

        monkeypatch.setattr(Flask, "run", fake_run)
        result = CliRunner().invoke(cli, ["serve", "--port", "8123", "--split", "5"])
        assert result.exit_code == 0, result.output
        assert "http://127.0.0.1:8123/stream" in result.output
        assert calls == [{"host": "127.0.0.1", "port": 8123, "debug": False}]

    def test_serve_with_payload_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        apps: list[Flask] = []
        monkeypatch.setattr(Flask, "run", lambda self, **kwargs: apps.append(self))
        path = tmp_path / "payloads.json"
        path.write_text("[[1, 2], [3]]", encoding="utf-8")

        result = CliRunner().invoke(cli, ["serve", "--payload-file", str(path)])
        assert result.exit_code == 0, result.output
        assert apps[0].config["PAYLOADS"] == [[1, 2], [3]]

    @pytest.mark.parametrize("content", ["{not json", '{"a": 1}', "[1, 2]"])
    def test_serve_rejects_bad_payload_file(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path, content: str
    ) -> None:
        monkeypatch.setattr(Flask, "run", lambda self, **kwargs: None)
        path = tmp_path / "payloads.json"
        path.write_text(content, encoding="utf-8")

        result = CliRunner().invoke(cli, ["serve", "--payload-file", str(path)])
        assert result.exit_code == 2
        assert "--payload-file" in result.output
