"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing, arrow keys, and SGR mouse-wheel events.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25

_SIMPLE_KEYS = {
    b"\t": "TAB",
    b"\r": "ENTER",
    b"\n": "ENTER",
    b"\x04": "CTRL_D",
    b"\x15": "CTRL_U",
}

_ARROWS = {b"A": "UP", b"B": "DOWN", b"C": "RIGHT", b"D": "LEFT"}


class KeyReader:
    """Decode key tokens from a raw-mode file descriptor."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._pending: list[bytes] = []

    def _read_ready_byte(self, timeout_ms: int) -> bytes | None:
        ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
        ch = os.read(self.fd, 1)
        return ch or None

    def read_key(self, timeout_ms: int | None = None) -> str:
        """Return the next key token, or ``""`` when ``timeout_ms`` elapses first."""
        if self._pending:
            ch = self._pending.pop(0)
        else:
            if timeout_ms is not None:
                ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
                if not ready:
                    return ""
            ch = os.read(self.fd, 1)
            if not ch:
                return ""

        if ch in _SIMPLE_KEYS:
            return _SIMPLE_KEYS[ch]
        if ch != b"\x1b":
            return ch.decode("utf-8", errors="replace")

        seq = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return "ESC"
        if seq != b"[":
            self._pending.append(seq)
            return "ESC"
        seq = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return "ESC"
        if seq in _ARROWS:
            return _ARROWS[seq]
        if seq in {b"5", b"6"}:
            tail = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if tail == b"~":
                return "PAGE_UP" if seq == b"5" else "PAGE_DOWN"
            return "ESC"
        if seq == b"<":
            return self._read_sgr_mouse()
        return "ESC"

    def _read_sgr_mouse(self) -> str:
        # SGR mouse: ESC [ < btn ; col ; row (M/m)
        payload: list[bytes] = []
        while True:
            part = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if part is None:
                return "ESC"
            if part in {b"M", b"m"}:
                break
            payload.append(part)
            if len(payload) > 64:
                return "ESC"
        return decode_sgr_mouse(b"".join(payload))


def decode_sgr_mouse(payload: bytes) -> str:
    """Translate an SGR mouse payload (``btn;col;row``) into a key token."""
    try:
        btn_s, col_s, row_s = payload.decode("ascii").split(";")
        btn = int(btn_s)
        col = int(col_s)
        row = int(row_s)
    except ValueError:
        return "ESC"
    if btn & 0b0100_0000:
        direction = {0: "UP", 1: "DOWN", 2: "LEFT", 3: "RIGHT"}[btn & 0b11]
        return f"MOUSE_WHEEL_{direction}:{col}:{row}"
    return "MOUSE"
