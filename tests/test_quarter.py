from __future__ import annotations

import pytest

from catalog_fallback.core.errors import FormatError
from catalog_fallback.core.normalize import format_item_code, pad_code, parse_item_code
from catalog_fallback.core.quarter import Quarter


def test_parse_and_render():
    q = Quarter.parse("171")
    assert (q.year, q.index) == (17, 1)
    assert str(q) == "171"
    assert Quarter.parse(234) == Quarter(23, 4)
    assert Quarter.parse(234).to_int() == 234


@pytest.mark.parametrize("raw", ["", "1", "ab1", "17x", "170", "175"])
def test_parse_rejects_bad_input(raw):
    with pytest.raises(FormatError):
        Quarter.parse(raw)


def test_linear_round_trip():
    for year in range(0, 40):
        for index in range(1, 5):
            q = Quarter(year, index)
            assert Quarter.from_linear(q.linearize()) == q


def test_add_quarters_crosses_year_boundaries():
    q = Quarter.parse("174")
    assert str(q.add_quarters(1)) == "181"
    assert str(q.add_quarters(-3)) == "171"
    assert str(q.add_quarters(-4)) == "164"
    assert str(Quarter.parse("181").add_quarters(-1)) == "174"
    assert q.add_quarters(0) == q


def test_constructor_normalizes_index():
    assert Quarter(17, 5) == Quarter(18, 1)
    assert Quarter(17, 0) == Quarter(16, 4)


def test_ordering_uses_linear_form():
    assert Quarter.parse("174") < Quarter.parse("181")
    assert max(Quarter.parse("193"), Quarter.parse("201")) == Quarter.parse("201")


def test_parse_item_code_variants():
    assert parse_item_code("FIGURE-123456").code == 123456
    assert parse_item_code("FIGURE-123456").prefix == "FIGURE"
    preowned = parse_item_code("FIGURE-012345-R")
    assert preowned.code == 12345
    assert preowned.preowned is True
    bare = parse_item_code("98765R")
    assert (bare.code, bare.preowned, bare.prefix) == (98765, True, None)
    with pytest.raises(FormatError):
        parse_item_code("FIGURE-abc")


def test_pad_and_format_item_code():
    assert pad_code(42) == "000042"
    assert format_item_code(parse_item_code("42-R")) == "FIGURE-000042-R"


def test_integer_storage_form_round_trips_single_digit_years():
    assert Quarter(9, 4).to_int() == 94
    assert Quarter.from_int(94) == Quarter(9, 4)
    assert Quarter.from_int(171) == Quarter(17, 1)
    for year in range(0, 40):
        for index in range(1, 5):
            q = Quarter(year, index)
            assert Quarter.from_int(q.to_int()) == q
