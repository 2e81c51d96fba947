from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from .errors import RecoveryFailed

_CLOSING_FOR = {"{": "}", "[": "]", '"': '"'}
_OPENING_FOR = {"}": "{", "]": "["}
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

# Literals and numbers cut off mid-token right after a separator.
_PARTIAL_TOKEN_RE = re.compile(
    r"(?<=[:,\[])\s*(?:t|tr|tru|f|fa|fal|fals|n|nu|nul|-|-?\d+\.|-?\d+(?:\.\d+)?[eE][+-]?)\s*$"
)
_TRAILING_COMMA_RE = re.compile(r",\s*$")


@dataclass
class RepairState:
    """Cursor state for a single :func:`repair_json` pass."""

    brackets: dict[str, list[int]] = field(default_factory=lambda: {"{": [], "[": []})
    quotes: list[int] = field(default_factory=list)
    is_assignment: bool = False
    open_property_declaration: bool = False
    escaped: bool = False
    escape_start: int | None = None
    unicode_digits_left: int = 0
    key_start: int | None = None
    key_closed: bool = False

    @property
    def inside_string(self) -> bool:
        return bool(self.quotes)

    def innermost_bracket(self) -> str | None:
        innermost = None
        position = -1
        for char, stack in self.brackets.items():
            if stack and stack[-1] > position:
                innermost, position = char, stack[-1]
        return innermost

    def unclosed(self) -> list[tuple[int, str]]:
        openings = [(pos, char) for char, stack in self.brackets.items() for pos in stack]
        openings.extend((pos, '"') for pos in self.quotes)
        return sorted(openings, reverse=True)


def _scan_string_char(state: RepairState, index: int, char: str) -> None:
    if state.unicode_digits_left:
        if char in _HEX_DIGITS:
            state.unicode_digits_left -= 1
            if not state.unicode_digits_left:
                state.escape_start = None
            return
        # malformed \u escape, the parser will reject it either way
        state.unicode_digits_left = 0
        state.escape_start = None

    if state.escaped:
        state.escaped = False
        if char == "u":
            state.unicode_digits_left = 4
        else:
            state.escape_start = None
        return

    if char == "\\":
        state.escaped = True
        state.escape_start = index
    elif char == '"':
        state.quotes.pop()
        if state.open_property_declaration:
            state.open_property_declaration = False
            state.key_closed = True


def scan(text: str) -> RepairState:
    state = RepairState()
    for index, char in enumerate(text):
        if state.inside_string:
            _scan_string_char(state, index, char)
            continue
        if char.isspace():
            continue

        state.key_closed = False
        if char == ":":
            state.is_assignment = True
        elif char == ",":
            state.is_assignment = False
        elif char in _OPENING_FOR:
            stack = state.brackets[_OPENING_FOR[char]]
            if stack:
                stack.pop()
            state.is_assignment = False
        elif char in state.brackets:
            state.brackets[char].append(index)
            state.is_assignment = False
        elif char == '"':
            if not state.is_assignment and state.innermost_bracket() == "{":
                state.open_property_declaration = True
                state.key_start = index
            state.quotes.append(index)
    return state


def repair_json(raw: str) -> str:
    """Best-effort completion of a truncated JSON document.

    Incomplete trailing properties are dropped rather than completed, and
    every structure still open at the end is closed innermost first. The
    result is not guaranteed to parse; see :func:`loads_partial`.
    """
    state = scan(raw)
    text = raw

    if state.inside_string:
        if state.open_property_declaration:
            text = text[: state.key_start]
            state.quotes.pop()
        elif state.escape_start is not None:
            text = text[: state.escape_start]
    else:
        text = _PARTIAL_TOKEN_RE.sub("", text)
        dangling_key = state.key_closed or text.rstrip().endswith(":")
        if dangling_key and state.key_start is not None:
            text = text[: state.key_start]

    if not state.inside_string:
        text = _TRAILING_COMMA_RE.sub("", text)
    return text + "".join(_CLOSING_FOR[char] for _, char in state.unclosed())


def loads_partial(raw: str) -> Any:
    repaired = repair_json(raw)
    try:
        return json.loads(repaired)
    except json.JSONDecodeError as exc:
        raise RecoveryFailed(raw, repaired, f"repaired payload is not valid JSON: {exc}") from exc
