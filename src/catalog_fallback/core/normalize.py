from __future__ import annotations

import re

from .errors import FormatError
from .types import ItemCode

CODE_WIDTH = 6

_ITEM_CODE_RE = re.compile(r"^(?:(?P<prefix>[A-Za-z]+)-)?(?P<code>\d+)(?P<preowned>-?R)?$")


def parse_item_code(raw: str) -> ItemCode:
    """Parse ``FIGURE-123456``, ``FIGURE-123456-R``, ``123456`` or ``123456R``.

    A trailing ``R`` marks a pre-owned listing.
    """
    value = (raw or "").strip()
    match = _ITEM_CODE_RE.match(value)
    if match is None:
        raise FormatError(f"invalid item code: {raw!r}")
    prefix = match.group("prefix")
    return ItemCode(
        code=int(match.group("code")),
        preowned=match.group("preowned") is not None,
        prefix=prefix.upper() if prefix else None,
    )


def pad_code(code: int | str) -> str:
    return str(code).zfill(CODE_WIDTH)


def format_item_code(item: ItemCode, default_prefix: str = "FIGURE") -> str:
    text = f"{item.prefix or default_prefix}-{pad_code(item.code)}"
    return f"{text}-R" if item.preowned else text
