from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...core.quarter import Quarter
from ...core.types import CodeReference
from .models import Figure


def _to_reference(row: Figure | None) -> CodeReference | None:
    if row is None:
        return None
    return CodeReference(code=row.code, quarter=Quarter.from_int(row.quarter), preowned=bool(row.preowned))


class FigureRepo:
    def __init__(self, session: Session):
        self.session = session

    def get(self, code: int) -> CodeReference | None:
        return _to_reference(self.session.get(Figure, code))

    def nearest_below(self, code: int) -> CodeReference | None:
        stmt = select(Figure).where(Figure.code < code).order_by(Figure.code.desc()).limit(1)
        return _to_reference(self.session.execute(stmt).scalar_one_or_none())

    def nearest_above(self, code: int) -> CodeReference | None:
        stmt = select(Figure).where(Figure.code > code).order_by(Figure.code.asc()).limit(1)
        return _to_reference(self.session.execute(stmt).scalar_one_or_none())

    def add_if_absent(self, code: int, quarter: Quarter, preowned: bool) -> bool:
        if self.session.get(Figure, code) is not None:
            return False
        try:
            with self.session.begin_nested():
                self.session.add(Figure(code=code, quarter=quarter.to_int(), preowned=preowned))
                self.session.flush()
        except IntegrityError as exc:
            message = str(exc).lower()
            if "catalog_figures.code" in message or "catalog_figures_pkey" in message:
                # Another writer got there first; existing mappings are never overwritten.
                return False
            raise
        return True

    def count(self) -> int:
        return self.session.execute(select(func.count()).select_from(Figure)).scalar_one()
