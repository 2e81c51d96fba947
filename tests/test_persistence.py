from __future__ import annotations

import pytest
from sqlalchemy import select

from catalog_fallback.core.errors import FormatError
from catalog_fallback.core.quarter import Quarter
from catalog_fallback.known_codes import parse_known_codes, seed_known_codes
from catalog_fallback.persistence.sqlalchemy.models import Figure


def test_insert_or_ignore_never_overwrites(uow_factory, session_factory):
    with uow_factory() as uow:
        assert uow.figures.add_if_absent(1234, Quarter.parse("191"), False) is True
        uow.commit()

    with uow_factory() as uow:
        assert uow.figures.add_if_absent(1234, Quarter.parse("204"), True) is False
        uow.commit()

    with session_factory() as session:
        rows = session.execute(select(Figure)).scalars().all()
        assert [(r.code, r.quarter, r.preowned) for r in rows] == [(1234, 191, False)]


def test_nearest_neighbours(uow_factory, seed_figures):
    with uow_factory() as uow:
        uow.figures.add_if_absent(100500, Quarter.parse("181"), True)
        uow.commit()

    with uow_factory() as uow:
        assert uow.figures.nearest_below(100050).code == 100000
        assert uow.figures.nearest_above(100050).code == 100100
        assert uow.figures.nearest_above(100100).code == 100500
        assert uow.figures.nearest_above(100500) is None
        assert uow.figures.nearest_below(100000) is None
        assert uow.figures.get(100500).preowned is True
        assert uow.figures.count() == 3


def test_uncommitted_writes_roll_back(uow_factory):
    with pytest.raises(RuntimeError):
        with uow_factory() as uow:
            uow.figures.add_if_absent(1, Quarter.parse("171"), False)
            raise RuntimeError("abort")

    with uow_factory() as uow:
        assert uow.figures.get(1) is None


def test_parse_known_codes():
    text = """
    # seeded by hand
    171: 100000 100001R 100002-R
    184: 200000
    """
    refs = parse_known_codes(text)
    assert [(r.code, str(r.quarter), r.preowned) for r in refs] == [
        (100000, "171", False),
        (100001, "171", True),
        (100002, "171", True),
        (200000, "184", False),
    ]


def test_parse_known_codes_reports_line_numbers():
    with pytest.raises(FormatError, match="line 2"):
        parse_known_codes("171: 1\n17x: 2\n")
    with pytest.raises(FormatError, match="line 1"):
        parse_known_codes("171 100000")


def test_seed_known_codes_skips_existing(uow_factory, seed_figures):
    inserted = seed_known_codes(uow_factory, "171: 100000 100010\n172: 100090R\n")
    assert inserted == 2
    with uow_factory() as uow:
        assert uow.figures.count() == 4
        assert str(uow.figures.get(100000).quarter) == "171"
        assert uow.figures.get(100090).preowned is True


def test_single_digit_year_quarter_reads_back(uow_factory):
    with uow_factory() as uow:
        assert uow.figures.add_if_absent(5, Quarter(9, 4), False) is True
        assert uow.figures.add_if_absent(9, Quarter(0, 1), False) is True
        uow.commit()

    with uow_factory() as uow:
        assert uow.figures.get(5).quarter == Quarter(9, 4)
        assert uow.figures.nearest_below(9).quarter == Quarter(9, 4)
        assert uow.figures.nearest_above(5).quarter == Quarter(0, 1)
