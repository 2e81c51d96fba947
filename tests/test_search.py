from __future__ import annotations

import asyncio

import pytest

from catalog_fallback.core.errors import TransportError
from catalog_fallback.core.quarter import Quarter
from catalog_fallback.core.search import QuarterSearch, zigzag_offset
from catalog_fallback.core.types import ProbeResult, SearchConfig


class StubProbe:
    def __init__(self, found_in: set[str] | None = None, fail_in: set[str] | None = None):
        self.found_in = found_in or set()
        self.fail_in = fail_in or set()
        self.calls: list[tuple[int, str]] = []

    async def check(self, code, quarter):
        self.calls.append((code, str(quarter)))
        if str(quarter) in self.fail_in:
            raise TransportError("boom", status=503)
        if str(quarter) in self.found_in:
            return ProbeResult(status="found", url=f"mem://{quarter}/{code}", payload=b"jpeg")
        return ProbeResult(status="miss", url=f"mem://{quarter}/{code}")


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay):
        self.delays.append(delay)


def test_zigzag_offsets():
    assert [zigzag_offset(n) for n in range(6)] == [1, -1, 2, -2, 3, -3]


def test_cache_hit_never_probes(uow_factory, seed_figures):
    async def run_test():
        probe = StubProbe(found_in={"171"})
        search = QuarterSearch(uow_factory=uow_factory, probe=probe, sleep=RecordingSleep())
        result = await search.search(100000)
        assert result.status == "hit"
        assert str(result.reference.quarter) == "171"
        assert probe.calls == []

    asyncio.run(run_test())


def test_no_reference_points_is_not_found(uow_factory):
    async def run_test():
        probe = StubProbe()
        search = QuarterSearch(uow_factory=uow_factory, probe=probe, sleep=RecordingSleep())
        result = await search.search(123)
        assert result.status == "not_found"
        assert result.reason == "no_reference_points"
        assert probe.calls == []

    asyncio.run(run_test())


def test_estimate_confirmed_on_first_probe_is_persisted(uow_factory, seed_figures):
    async def run_test():
        probe = StubProbe(found_in={"172"})
        sleep = RecordingSleep()
        search = QuarterSearch(uow_factory=uow_factory, probe=probe, sleep=sleep)
        result = await search.search(100050, preowned=True)
        assert result.status == "confirmed"
        assert result.attempts == 1
        assert result.payload == b"jpeg"
        assert probe.calls == [(100050, "172")]
        assert sleep.delays == []

        with uow_factory() as uow:
            stored = uow.figures.get(100050)
        assert stored.quarter == Quarter.parse("172")
        assert stored.preowned is True

        again = await search.search(100050)
        assert again.status == "hit"
        assert len(probe.calls) == 1

    asyncio.run(run_test())


def test_zigzag_probe_order_and_bound(uow_factory, seed_figures):
    async def run_test():
        probe = StubProbe()
        sleep = RecordingSleep()
        search = QuarterSearch(uow_factory=uow_factory, probe=probe, sleep=sleep)
        result = await search.search(100050)

        assert result.status == "not_found"
        assert result.reason == "probe_budget_exhausted"
        assert result.attempts == 16
        assert len(probe.calls) == 16

        start = Quarter.parse("172")
        expected = [0, 1, -1, 2, -2, 3, -3, 4, -4, 5, -5, 6, -6, 7, -7, 8]
        assert [q for _, q in probe.calls] == [str(start.add_quarters(n)) for n in expected]
        assert sleep.delays == [0.25] * 15

        with uow_factory() as uow:
            assert uow.figures.get(100050) is None

    asyncio.run(run_test())


def test_found_after_expansion_below_estimate(uow_factory, seed_figures):
    async def run_test():
        probe = StubProbe(found_in={"164"})
        search = QuarterSearch(uow_factory=uow_factory, probe=probe, sleep=RecordingSleep())
        result = await search.search(100050)
        assert result.status == "confirmed"
        assert str(result.reference.quarter) == "164"
        assert [q for _, q in probe.calls] == ["172", "173", "171", "174", "164"]

    asyncio.run(run_test())


def test_transport_error_propagates_without_retry(uow_factory, seed_figures):
    async def run_test():
        probe = StubProbe(fail_in={"173"})
        sleep = RecordingSleep()
        search = QuarterSearch(uow_factory=uow_factory, probe=probe, sleep=sleep)
        with pytest.raises(TransportError):
            await search.search(100050)
        assert [q for _, q in probe.calls] == ["172", "173"]
        assert sleep.delays == [0.25]

    asyncio.run(run_test())


def test_single_reference_uses_its_quarter(uow_factory, seed_figures):
    async def run_test():
        probe = StubProbe(found_in={"172"})
        search = QuarterSearch(uow_factory=uow_factory, probe=probe, sleep=RecordingSleep())
        result = await search.search(200000)
        assert result.status == "confirmed"
        assert probe.calls == [(200000, "172")]

    asyncio.run(run_test())


def test_custom_budget(uow_factory, seed_figures):
    async def run_test():
        probe = StubProbe()
        search = QuarterSearch(
            uow_factory=uow_factory,
            probe=probe,
            config=SearchConfig(max_attempts=3, backoff_seconds=0.0),
            sleep=RecordingSleep(),
        )
        result = await search.search(100050)
        assert result.status == "not_found"
        assert [q for _, q in probe.calls] == ["172", "173", "171"]

    asyncio.run(run_test())
