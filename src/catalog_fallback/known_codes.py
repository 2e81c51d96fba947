from __future__ import annotations

import logging
from typing import Callable

from .core.errors import FormatError
from .core.normalize import parse_item_code
from .core.quarter import Quarter
from .core.types import CodeReference
from .persistence.interfaces import UnitOfWork

logger = logging.getLogger(__name__)


def parse_known_codes(text: str) -> list[CodeReference]:
    """Parse ``QUARTER: code code code-R`` listings, one quarter per line.

    Blank lines and ``#`` comments are skipped.
    """
    references: list[CodeReference] = []
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.split("#", 1)[0].strip()
        if not line:
            continue
        quarter_text, sep, codes_text = line.partition(":")
        if not sep:
            raise FormatError(f"line {line_number}: expected 'QUARTER: codes', got {raw_line!r}")
        try:
            quarter = Quarter.parse(quarter_text)
            for token in codes_text.split():
                item = parse_item_code(token)
                references.append(CodeReference(code=item.code, quarter=quarter, preowned=item.preowned))
        except FormatError as exc:
            raise FormatError(f"line {line_number}: {exc}") from exc
    return references


def seed_known_codes(uow_factory: Callable[[], UnitOfWork], text: str) -> int:
    references = parse_known_codes(text)
    inserted = 0
    with uow_factory() as uow:
        for ref in references:
            if uow.figures.add_if_absent(ref.code, ref.quarter, ref.preowned):
                inserted += 1
        uow.commit()
    logger.info("Seeded %d of %d known codes", inserted, len(references))
    return inserted
