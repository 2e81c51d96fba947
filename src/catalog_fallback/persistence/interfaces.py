from __future__ import annotations

from typing import Protocol

from ..core.quarter import Quarter
from ..core.types import CodeReference


class FigureRepo(Protocol):
    def get(self, code: int) -> CodeReference | None: ...
    def nearest_below(self, code: int) -> CodeReference | None: ...
    def nearest_above(self, code: int) -> CodeReference | None: ...
    def add_if_absent(self, code: int, quarter: Quarter, preowned: bool) -> bool: ...
    def count(self) -> int: ...


class UnitOfWork(Protocol):
    figures: FigureRepo

    def commit(self) -> None: ...
    def rollback(self) -> None: ...

    def __enter__(self) -> "UnitOfWork": ...
    def __exit__(self, exc_type, exc, tb) -> None: ...
