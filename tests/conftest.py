from __future__ import annotations

import pytest

from catalog_fallback.core.quarter import Quarter
from catalog_fallback.persistence.sqlalchemy.db import build_engine, build_session_factory, create_schema
from catalog_fallback.persistence.sqlalchemy.uow import SQLAlchemyUnitOfWork


@pytest.fixture()
def session_factory():
    engine = build_engine("sqlite+pysqlite:///:memory:")
    create_schema(engine)
    return build_session_factory(engine)


@pytest.fixture()
def uow_factory(session_factory):
    def _factory():
        return SQLAlchemyUnitOfWork(session_factory)

    return _factory


@pytest.fixture()
def seed_figures(uow_factory):
    with uow_factory() as uow:
        uow.figures.add_if_absent(100000, Quarter.parse("171"), False)
        uow.figures.add_if_absent(100100, Quarter.parse("172"), False)
        uow.commit()
    return {"lower": 100000, "upper": 100100}
