"""
Incremental parser for the chat-completion event stream.

The relay forwards the gateway's body untouched, so reads arrive cut at
arbitrary byte offsets: in the middle of a UTF-8 character, of a line, or
of a JSON frame. ``SSEDeltaParser`` keeps the undecoded tail between reads
and turns complete ``data: {...}`` lines into text deltas taken from
``choices[0].delta.content``.

    parser = SSEDeltaParser()
    for chunk in response.iter_content(chunk_size=None):
        for delta in parser.feed(chunk):
            render(delta)
        if parser.done:
            break
    parser.flush()

``iter_deltas`` wraps that loop for any iterable of byte chunks.
"""
from __future__ import annotations

import codecs
import json
from typing import Any, Iterable, Iterator, List, Optional

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def extract_delta(frame: Any) -> Optional[str]:
    """Return ``choices[0].delta.content`` when it is a non-empty string."""
    if not isinstance(frame, dict):
        return None
    choices = frame.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    delta = first.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    if isinstance(content, str) and content:
        return content
    return None


class SSEDeltaParser:
    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self.text_buffer = ""
        self.content = ""
        self.done = False

    def _process_line(self, line: str) -> Optional[str]:
        """
        Handle one line without its ``\\n``.
        Raises ``ValueError`` when the payload is not (yet) valid JSON.
        """
        if line.endswith("\r"):
            line = line[:-1]
        if not line.strip() or line.startswith(":"):
            return None
        if not line.startswith(DATA_PREFIX):
            return None

        payload = line[len(DATA_PREFIX):].strip()
        if payload == DONE_SENTINEL:
            self.done = True
            return None

        delta = extract_delta(json.loads(payload))
        if delta:
            self.content += delta
        return delta

    def feed(self, chunk: bytes) -> List[str]:
        """Consume one read and return the deltas it completed, in order."""
        if self.done:
            return []

        self.text_buffer += self._decoder.decode(chunk)
        deltas: List[str] = []

        while not self.done:
            newline = self.text_buffer.find("\n")
            if newline == -1:
                break
            line = self.text_buffer[:newline]
            self.text_buffer = self.text_buffer[newline + 1:]

            try:
                delta = self._process_line(line)
            except ValueError:
                # frame not complete yet; put it back and wait for the next read
                self.text_buffer = line + "\n" + self.text_buffer
                break
            if delta:
                deltas.append(delta)

        return deltas

    def flush(self) -> List[str]:
        """
        End of stream: run whatever is left in the buffer line by line.
        No more bytes are coming, so frames that still do not parse are dropped.
        """
        if self.done:
            return []

        self.text_buffer += self._decoder.decode(b"", final=True)
        remaining, self.text_buffer = self.text_buffer, ""

        deltas: List[str] = []
        for line in remaining.split("\n"):
            if self.done:
                break
            try:
                delta = self._process_line(line)
            except ValueError:
                continue
            if delta:
                deltas.append(delta)
        return deltas


def iter_deltas(chunks: Iterable[bytes], parser: Optional[SSEDeltaParser] = None) -> Iterator[str]:
    """Lazily yield text deltas; stops at ``[DONE]`` and flushes at end of input."""
    if parser is None:
        parser = SSEDeltaParser()

    for chunk in chunks:
        if not chunk:
            continue
        yield from parser.feed(chunk)
        if parser.done:
            return

    yield from parser.flush()


def accumulate(chunks: Iterable[bytes]) -> str:
    parser = SSEDeltaParser()
    for _ in iter_deltas(chunks, parser):
        pass
    return parser.content
