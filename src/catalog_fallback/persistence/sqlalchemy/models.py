from __future__ import annotations

from sqlalchemy import Boolean, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, CreatedAtMixin


class Figure(CreatedAtMixin, Base):
    """Confirmed code to quarter mapping.

    ``quarter`` is stored in its ``YYQ`` integer form (``171``).
    """

    __tablename__ = "catalog_figures"

    code: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    quarter: Mapped[int] = mapped_column(Integer, nullable=False)
    preowned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
