"""Tests for the Flask demo stream server."""
from __future__ import annotations

import json

import pytest

from chunksource.demo import DEFAULT_PAYLOADS, create_app, encode_lines, split_text


@pytest.fixture
def client():
    app = create_app(payloads=[[1, 2], [{"a": "b"}]], split=4)
    app.config["TESTING"] = True
    return app.test_client()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def test_encode_lines() -> None:
    assert encode_lines([[1], ["é"]]) == 'data:[1]\ndata:["é"]\n'


def test_split_text() -> None:
    assert list(split_text("abcdefg", 3)) == ["abc", "def", "g"]


@pytest.mark.parametrize("size", [None, 0, -1])
def test_split_text_whole(size) -> None:
    assert list(split_text("abc", size)) == ["abc"]


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


def test_stream_body(client) -> None:
    resp = client.get("/stream")
    assert resp.status_code == 200
    assert resp.mimetype == "text/event-stream"
    assert resp.get_data(as_text=True) == 'data:[1, 2]\ndata:[{"a": "b"}]\n'


def test_stream_is_chunked(client) -> None:
    resp = client.get("/stream")
    chunks = list(resp.response)
    assert len(chunks) > 1
    assert all(len(c) <= 4 for c in chunks)


def test_split_query_overrides_default(client) -> None:
    resp = client.get("/stream?split=100")
    assert len(list(resp.response)) == 1


def test_post_stream(client) -> None:
    resp = client.post("/stream", json={"ignored": True})
    assert resp.status_code == 200


def test_payloads_route(client) -> None:
    resp = client.get("/payloads")
    assert resp.get_json() == [[1, 2], [{"a": "b"}]]


def test_default_payloads() -> None:
    app = create_app()
    resp = app.test_client().get("/payloads")
    assert resp.get_json() == json.loads(json.dumps(DEFAULT_PAYLOADS))
