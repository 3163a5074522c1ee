"""Flask demo server that streams JSON-array payloads in arbitrary chunks."""
from __future__ import annotations

import json
from collections.abc import Iterator, Sequence
from typing import Any

from flask import Flask, Response, jsonify, request

DEFAULT_PAYLOADS: list[list[Any]] = [
    [{"id": 1, "text": "hello"}],
    [{"id": 2, "text": "chunked"}, {"id": 3, "text": "world"}],
    [0, "", {"id": 4, "text": "falsy items are dropped"}],
]


def encode_lines(payloads: Sequence[list[Any]]) -> str:
    """Render payloads as ``data:<json>`` lines."""
    return "".join(f"data:{json.dumps(p, ensure_ascii=False)}\n" for p in payloads)


def split_text(text: str, size: int | None) -> Iterator[str]:
    """Cut *text* into pieces of *size* characters (whole text when ``None``)."""
    if not size or size <= 0:
        yield text
        return
    for start in range(0, len(text), size):
        yield text[start:start + size]


def create_app(
    payloads: Sequence[list[Any]] | None = None,
    split: int | None = None,
) -> Flask:
    """Create the demo app.

    ``GET|POST /stream`` streams *payloads*, re-cut into chunks of
    *split* characters so payloads straddle chunk boundaries.  The
    ``split`` query argument overrides the default per request.
    """
    app = Flask(__name__)
    app.config["PAYLOADS"] = [list(p) for p in (payloads or DEFAULT_PAYLOADS)]
    app.config["SPLIT"] = split

    @app.route("/stream", methods=["GET", "POST"])
    def stream():
        size = request.args.get("split", type=int, default=app.config["SPLIT"])
        body = encode_lines(app.config["PAYLOADS"])

        def generate() -> Iterator[bytes]:
            for piece in split_text(body, size):
                yield piece.encode("utf-8")

        return Response(
            generate(),
            mimetype="text/event-stream",
            headers={"Cache-Control": "no-cache"},
        )

    @app.route("/payloads")
    def list_payloads():
        return jsonify(app.config["PAYLOADS"])

    return app
