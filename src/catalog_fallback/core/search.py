from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable

from .estimator import initial_guess
from .ports import ExistenceProbePort
from .quarter import Quarter
from .types import CodeReference, SearchConfig, SearchResult

if TYPE_CHECKING:
    from ..persistence.interfaces import UnitOfWork


def zigzag_offset(attempt: int) -> int:
    """Offset from the initial guess probed after miss number ``attempt``.

    Yields ``+1, -1, +2, -2, ...`` for ``attempt = 0, 1, 2, 3, ...``.
    """
    sign = 1 if attempt % 2 == 0 else -1
    return (attempt // 2 + 1) * sign


class QuarterSearch:
    """Locate the catalog quarter of an item code by probing the image host.

    Known mappings come from the unit of work's ``figures`` repo; a miss
    there seeds an estimate from the nearest known codes, which is then
    confirmed by probing outward from the estimate.
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        probe: ExistenceProbePort,
        config: SearchConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        logger: logging.Logger | None = None,
    ):
        self._uow_factory = uow_factory
        self._probe = probe
        self._config = config or SearchConfig()
        self._sleep = sleep
        self._logger = logger or logging.getLogger(__name__)

    async def search(self, code: int, preowned: bool = False) -> SearchResult:
        with self._uow_factory() as uow:
            existing = uow.figures.get(code)
            if existing is not None:
                return SearchResult(status="hit", code=code, reference=existing)
            lower = uow.figures.nearest_below(code)
            upper = uow.figures.nearest_above(code)

        start = initial_guess(lower, upper, code)
        if start is None:
            self._logger.warning("No reference codes around %s, cannot guess a quarter", code)
            return SearchResult(status="not_found", code=code, reason="no_reference_points")

        self._logger.info(
            "Guessing quarter for %s (%s), initial guess %s",
            code,
            "preowned" if preowned else "not preowned",
            start,
        )
        return await self._probe_from(code, preowned, start)

    async def _probe_from(self, code: int, preowned: bool, start: Quarter) -> SearchResult:
        max_attempts = self._config.max_attempts
        quarter = start
        attempt = 0
        while attempt < max_attempts:
            result = await self._probe.check(code, quarter)
            if result.found:
                reference = CodeReference(code=code, quarter=quarter, preowned=preowned)
                self._remember(reference)
                self._logger.info("Found image for %s in %s after %d probe(s)", code, quarter, attempt + 1)
                return SearchResult(
                    status="confirmed",
                    code=code,
                    reference=reference,
                    payload=result.payload,
                    attempts=attempt + 1,
                )

            offset = zigzag_offset(attempt)
            attempt += 1
            if attempt >= max_attempts:
                break
            quarter = start.add_quarters(offset)
            self._logger.debug("No image for %s, retrying with %s (%s %+d)", code, quarter, start, offset)
            await self._sleep(self._config.backoff_seconds)

        self._logger.warning("Gave up on %s after %d probes around %s", code, attempt, start)
        return SearchResult(status="not_found", code=code, attempts=attempt, reason="probe_budget_exhausted")

    def _remember(self, reference: CodeReference) -> None:
        with self._uow_factory() as uow:
            inserted = uow.figures.add_if_absent(reference.code, reference.quarter, reference.preowned)
            uow.commit()
        if not inserted:
            self._logger.debug("Mapping for %s already stored, keeping existing row", reference.code)
