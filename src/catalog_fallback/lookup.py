from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from cachetools import TTLCache

from .catalog_api import CatalogApiClient, Item
from .core.errors import FormatError, RecoveryFailed, TransportError
from .core.normalize import parse_item_code
from .core.quarter import Quarter
from .core.search import QuarterSearch
from .http_probe import ImageProbe
from .persistence.interfaces import UnitOfWork


@dataclass(frozen=True)
class LookupConfig:
    # most upstream services have strict rate limits, so results live for an hour
    cache_ttl_seconds: float = 60 * 60
    cache_maxsize: int = 1024
    fallback_prefix: str = "FIGURE"


@dataclass
class LookupResult:
    status: str
    code: str
    item: Optional[Item] = None
    quarter: Optional[Quarter] = None
    image_url: Optional[str] = None
    image: Optional[bytes] = None
    partial: bool = False
    reason: Optional[str] = None


class CatalogLookup:
    """Answer "does this item exist, and where is its image".

    The product API is asked first. When it is unreachable, returns a body
    that cannot be recovered, or does not know the code, ``FIGURE`` codes
    fall back to :class:`~catalog_fallback.core.search.QuarterSearch`.
    """

    def __init__(
        self,
        api: CatalogApiClient,
        search: QuarterSearch,
        probe: ImageProbe,
        uow_factory: Callable[[], UnitOfWork],
        config: LookupConfig | None = None,
        cache: TTLCache | None = None,
        logger: logging.Logger | None = None,
    ):
        self._api = api
        self._search = search
        self._probe = probe
        self._uow_factory = uow_factory
        self._config = config or LookupConfig()
        self._cache = (
            cache
            if cache is not None
            else TTLCache(maxsize=self._config.cache_maxsize, ttl=self._config.cache_ttl_seconds)
        )
        self._logger = logger or logging.getLogger(__name__)

    async def lookup(self, raw_code: str, code_type: str = "gcode") -> LookupResult:
        key = f"{code_type}={raw_code}"
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        result = await self._lookup_uncached(raw_code, code_type)
        if result.status != "not_found":
            self._cache[key] = result
        return result

    async def _lookup_uncached(self, raw_code: str, code_type: str) -> LookupResult:
        try:
            item = await self._api.item(raw_code, code_type)
        except TransportError as exc:
            self._logger.warning("Catalog API unavailable for %s: %s", raw_code, exc)
            item = None
        except RecoveryFailed as exc:
            self._logger.warning(
                "Could not recover truncated response for %s: %s (repaired tail %r)",
                raw_code,
                exc,
                exc.repaired[-80:],
            )
            item = None

        if item is not None and item.partial and not self._matches_request(item, raw_code):
            # a cut-off code field repairs into a different, shorter code
            self._logger.warning(
                "Truncated response for %s identifies %r, ignoring it",
                raw_code,
                item.code,
            )
            item = None

        if item is not None:
            self._record(item)
            return LookupResult(
                status="api",
                code=raw_code,
                item=item,
                quarter=item.quarter,
                image_url=item.image,
                partial=item.partial,
            )
        return await self.fallback(raw_code)

    async def fallback(self, raw_code: str) -> LookupResult:
        try:
            parsed = parse_item_code(raw_code)
        except FormatError:
            return LookupResult(status="not_found", code=raw_code, reason="invalid_code")
        if parsed.prefix != self._config.fallback_prefix:
            return LookupResult(status="not_found", code=raw_code, reason="unsupported_prefix")

        result = await self._search.search(parsed.code, parsed.preowned)
        if result.reference is None:
            return LookupResult(status="not_found", code=raw_code, reason=result.reason)

        quarter = result.reference.quarter
        image = result.payload
        if result.status == "hit":
            probe_result = await self._probe.check(parsed.code, quarter)
            if not probe_result.found:
                self._logger.warning("Stored quarter %s for %s no longer has an image", quarter, raw_code)
                return LookupResult(status="not_found", code=raw_code, quarter=quarter, reason="stale_mapping")
            image = probe_result.payload

        return LookupResult(
            status="fallback",
            code=raw_code,
            quarter=quarter,
            image_url=self._probe.image_url(parsed.code, quarter),
            image=image,
        )

    @staticmethod
    def _matches_request(item: Item, raw_code: str) -> bool:
        try:
            requested = parse_item_code(raw_code)
        except FormatError:
            return False
        return item.item_code == requested

    def _record(self, item: Item) -> None:
        item_code = item.item_code
        quarter = item.quarter
        if item_code is None or quarter is None:
            return
        if item_code.prefix != self._config.fallback_prefix:
            return
        with self._uow_factory() as uow:
            if uow.figures.add_if_absent(item_code.code, quarter, item_code.preowned):
                self._logger.info("Recorded %s in quarter %s from catalog API", item.code, quarter)
            uow.commit()
