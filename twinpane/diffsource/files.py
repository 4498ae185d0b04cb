"""Load file contents as lines for diffing."""

from __future__ import annotations

from pathlib import Path

from ..errors import BinaryFileError

BINARY_SNIFF_BYTES = 8000


def is_binary_content(data: bytes) -> bool:
    """Treat content with a NUL byte near the start as binary, like git does."""
    return b"\x00" in data[:BINARY_SNIFF_BYTES]


def decode_text(data: bytes) -> str:
    """Decode as UTF-8 (dropping a BOM), falling back to latin-1."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` only, the way git counts lines.

    One trailing ``\\r`` is dropped from each line. Form feeds, ``\\x85`` and the
    Unicode line separators stay inside their line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def text_lines_from_bytes(data: bytes, label: str) -> list[str]:
    if is_binary_content(data):
        raise BinaryFileError(label)
    return split_lines(decode_text(data))


def load_text_lines(path: Path) -> list[str]:
    """Read ``path`` as a list of lines; raises ``BinaryFileError`` for binary files."""
    return text_lines_from_bytes(path.read_bytes(), str(path))
