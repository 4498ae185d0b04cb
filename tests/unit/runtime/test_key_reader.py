"""Raw-key decoding from a pipe standing in for the terminal."""

import os
import time
import unittest

from twinpane.runtime.input import KeyReader, decode_sgr_mouse


class KeyReaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.read_fd, self.write_fd = os.pipe()
        self.reader = KeyReader(self.read_fd)

    def tearDown(self) -> None:
        os.close(self.read_fd)
        os.close(self.write_fd)

    def _keys(self, data: bytes, count: int) -> list[str]:
        os.write(self.write_fd, data)
        return [self.reader.read_key(timeout_ms=20) for _ in range(count)]

    def test_lone_escape_does_not_wait_for_another_key(self) -> None:
        os.write(self.write_fd, b"\x1b")
        started = time.monotonic()
        key = self.reader.read_key(timeout_ms=20)
        self.assertEqual(key, "ESC")
        self.assertLess(time.monotonic() - started, 0.2)

    def test_arrows_and_paging_sequences(self) -> None:
        self.assertEqual(
            self._keys(b"\x1b[A\x1b[B\x1b[C\x1b[D\x1b[5~\x1b[6~", 6),
            ["UP", "DOWN", "RIGHT", "LEFT", "PAGE_UP", "PAGE_DOWN"],
        )

    def test_control_keys_and_plain_characters(self) -> None:
        self.assertEqual(self._keys(b"\tq\r\x04\x15", 5), ["TAB", "q", "ENTER", "CTRL_D", "CTRL_U"])

    def test_escape_followed_by_other_byte_keeps_that_byte(self) -> None:
        self.assertEqual(self._keys(b"\x1bj", 2), ["ESC", "j"])

    def test_timeout_returns_empty_token(self) -> None:
        self.assertEqual(self.reader.read_key(timeout_ms=1), "")

    def test_sgr_mouse_wheel_sequence(self) -> None:
        self.assertEqual(self._keys(b"\x1b[<65;12;7M", 1), ["MOUSE_WHEEL_DOWN:12:7"])


class DecodeSgrMouseTests(unittest.TestCase):
    def test_wheel_directions(self) -> None:
        self.assertEqual(decode_sgr_mouse(b"64;3;4"), "MOUSE_WHEEL_UP:3:4")
        self.assertEqual(decode_sgr_mouse(b"66;3;4"), "MOUSE_WHEEL_LEFT:3:4")
        self.assertEqual(decode_sgr_mouse(b"67;3;4"), "MOUSE_WHEEL_RIGHT:3:4")

    def test_clicks_and_garbage(self) -> None:
        self.assertEqual(decode_sgr_mouse(b"0;3;4"), "MOUSE")
        self.assertEqual(decode_sgr_mouse(b"nonsense"), "ESC")


if __name__ == "__main__":
    unittest.main()
