"""Background colors for added/removed rows over syntax-colored text."""

from __future__ import annotations

import re

from ..rows import LINE_ADDED, LINE_REMOVED, LineType

ADDED_BG_SGR = "48;2;36;74;52"
REMOVED_BG_SGR = "48;2;92;43;49"
COLLAPSE_SGR = "2;3"
_DIFF_CONTRAST_8BIT = "246"
_DIFF_CONTRAST_TRUECOLOR = ("170", "170", "170")
_SGR_RE = re.compile(r"\x1b\[([0-9;]*)m")


def background_for(line_type: LineType) -> str | None:
    if line_type == LINE_ADDED:
        return ADDED_BG_SGR
    if line_type == LINE_REMOVED:
        return REMOVED_BG_SGR
    return None


def boost_foreground_contrast(params: str) -> str:
    """Lift gray and faint foregrounds so they stay legible on diff backgrounds."""
    parts = [part for part in params.split(";") if part]
    if not parts:
        return params

    boosted: list[str] = []
    index = 0
    while index < len(parts):
        token = parts[index]

        if token in {"38", "48"} and index + 1 < len(parts):
            mode = parts[index + 1]
            if mode == "5" and index + 2 < len(parts):
                color_token = parts[index + 2]
                if token == "38" and color_token.isdigit() and 232 <= int(color_token) <= 248:
                    color_token = _DIFF_CONTRAST_8BIT
                boosted.extend([token, "5", color_token])
                index += 3
                continue
            if mode == "2" and index + 4 < len(parts):
                rgb = parts[index + 2 : index + 5]
                if token == "38" and all(value.isdigit() for value in rgb):
                    red, green, blue = (int(value) for value in rgb)
                    if abs(red - green) <= 8 and abs(green - blue) <= 8 and max(red, green, blue) < 190:
                        rgb = list(_DIFF_CONTRAST_TRUECOLOR)
                boosted.extend([token, "2", *rgb])
                index += 5
                continue

        # Faint text disappears on colored backgrounds.
        if token == "2":
            index += 1
            continue

        if token in {"30", "90"}:
            boosted.extend(["38", "5", _DIFF_CONTRAST_8BIT])
            index += 1
            continue

        boosted.append(token)
        index += 1

    return ";".join(boosted)


def apply_line_background(text: str, bg_sgr: str) -> str:
    """Keep ``bg_sgr`` active across every style change inside ``text``."""

    def _inject_bg(match: re.Match[str]) -> str:
        params = boost_foreground_contrast(match.group(1))
        if params:
            return f"\033[{params};{bg_sgr}m"
        return f"\033[{bg_sgr}m"

    return f"\033[{bg_sgr}m{_SGR_RE.sub(_inject_bg, text)}\033[0m"


def apply_sgr(text: str, sgr: str) -> str:
    return f"\033[{sgr}m{text}\033[0m"
