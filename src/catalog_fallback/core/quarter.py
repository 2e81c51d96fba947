from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering

from .errors import FormatError


@total_ordering
@dataclass(frozen=True)
class Quarter:
    """Catalog time partition, rendered as ``YYQ`` (``171`` is 2017 Q1).

    ``index`` is always kept in ``1..4``; out of range values are carried
    into the year on construction.
    """

    year: int
    index: int

    def __post_init__(self) -> None:
        if not 1 <= self.index <= 4:
            year, index = _split_linear(self.year * 4 + self.index)
            object.__setattr__(self, "year", year)
            object.__setattr__(self, "index", index)

    @classmethod
    def parse(cls, value: str | int) -> "Quarter":
        text = str(value).strip()
        year_part, index_part = text[:2], text[2:]
        if not (year_part.isdigit() and index_part.isdigit()):
            raise FormatError(f"invalid quarter: {value!r}")
        index = int(index_part)
        if not 1 <= index <= 4:
            raise FormatError(f"quarter index out of range: {value!r}")
        return cls(int(year_part), index)

    @classmethod
    def from_linear(cls, count: int) -> "Quarter":
        year, index = _split_linear(count)
        return cls(year, index)

    def linearize(self) -> int:
        return self.year * 4 + self.index

    def add_quarters(self, delta: int) -> "Quarter":
        return Quarter.from_linear(self.linearize() + delta)

    def to_int(self) -> int:
        return int(str(self))

    @classmethod
    def from_int(cls, value: int) -> "Quarter":
        """Inverse of :meth:`to_int`; one-digit years lose their padding as integers."""
        return cls.parse(f"{int(value):03d}")

    def __str__(self) -> str:
        return f"{self.year}{self.index}"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Quarter):
            return NotImplemented
        return self.linearize() < other.linearize()


def _split_linear(count: int) -> tuple[int, int]:
    return (count - 1) // 4, ((count - 1) % 4) + 1
