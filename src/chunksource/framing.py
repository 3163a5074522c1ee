"""Event framing: reassemble JSON-array payloads from text fragments.

A transport may cut a response body at any byte offset, so a single
``data:[...]`` line can arrive spread over several chunks.  Framing
keeps the unparseable tail of the most recent line in a
:class:`PendingBuffer` and retries it joined with the next line.

Wire convention::

    data:[{"id": 1}, {"id": 2}]\\n
    [3, 4]\\n

Each line is optionally prefixed with ``data:``; the rest must be JSON.
Array items become the payload of one event per fragment.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from chunksource.types.config import FramingOptions
from chunksource.types.events import EventRecord

logger = logging.getLogger(__name__)

_DEFAULT_OPTIONS = FramingOptions()

_MISSING = object()


@dataclass
class PendingBuffer:
    """Carry-over text of one incomplete line.

    Empty when nothing is pending.
    """

    text: str = ""

    def __bool__(self) -> bool:
        return bool(self.text)

    def __len__(self) -> int:
        return len(self.text)

    def clear(self) -> None:
        self.text = ""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _loads(text: str) -> Any:
    """Parse *text* as strict JSON, returning ``_MISSING`` when it is not valid.

    ``NaN`` and ``Infinity`` are rejected.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return _MISSING


def is_json_string(text: str) -> bool:
    """Return ``True`` if *text* is a complete, valid JSON document."""
    return _loads(text) is not _MISSING


def is_falsy(item: Any) -> bool:
    """Return ``True`` for items dropped from a payload.

    ``None``, ``False``, numeric zero and the empty string are falsy.
    Empty lists and objects are kept.
    """
    if item is None or item is False or item == "":
        return True
    if isinstance(item, (int, float)) and not isinstance(item, bool):
        return item == 0
    return False


def _strip_prefix(line: str, prefix: str) -> str:
    if prefix and line.startswith(prefix):
        # Leading whitespace only: trailing whitespace may belong to a
        # JSON string that continues in the next chunk.
        return line[len(prefix):].lstrip()
    return line


def _starts_field(raw_line: str, line: str, pending: PendingBuffer, prefix: str) -> bool:
    """Return ``True`` if *raw_line* opens a new payload rather than continuing *pending*."""
    if prefix and raw_line.startswith(prefix):
        return True
    if not line.startswith("["):
        return False
    # After "[", "," or ":" an array is a nested value of the pending payload.
    tail = pending.text.rstrip()
    return not tail or tail[-1] not in "[,:"


def frame_fragment(
    fragment: str,
    pending: PendingBuffer,
    options: FramingOptions | None = None,
) -> EventRecord:
    """Frame one decoded text fragment into an :class:`EventRecord`.

    *pending* is read and updated in place.  It holds at most one partial
    line: a line that opens a new payload replaces text that never parsed.
    The returned record has ``data=None`` when the fragment produced no
    items.
    """
    opts = options or _DEFAULT_OPTIONS
    items: list[Any] = []

    for raw_line in fragment.split("\n"):
        if not raw_line:
            continue
        line = _strip_prefix(raw_line, opts.data_prefix)
        if not line.strip():
            if pending:
                # Whitespace cut off between two chunks of a pending line.
                pending.text += line
            continue

        value = _loads(line)
        # While a payload is pending only a complete array stands on its own;
        # any other JSON value (a number, a string) is a mid-line piece.
        if value is _MISSING or (pending and not isinstance(value, list)):
            if pending:
                joined = _strip_prefix(pending.text + line, opts.data_prefix)
                joined_value = _loads(joined)
                if joined_value is not _MISSING:
                    pending.clear()
                    value = joined_value
                elif _starts_field(raw_line, line, pending, opts.data_prefix):
                    logger.debug("Discarding stale pending text: %r", pending.text)
                    pending.clear()
                else:
                    logger.debug("Line is not JSON yet, buffering: %r", line)
                    pending.text = joined
                    _enforce_cap(pending, opts)
                    continue
            if value is _MISSING:
                pending.text = line
                _enforce_cap(pending, opts)
                continue

        if isinstance(value, list):
            items.extend(value)
        elif opts.wrap_scalars:
            items.append(value)
        else:
            logger.debug("Dropping non-array JSON line: %r", line)

    items = [item for item in items if not is_falsy(item)]
    return EventRecord(data=items or None)


def _enforce_cap(pending: PendingBuffer, opts: FramingOptions) -> None:
    if opts.max_pending is not None and len(pending) > opts.max_pending:
        logger.warning(
            "Discarding %d pending characters that never became valid JSON",
            len(pending),
        )
        pending.clear()
