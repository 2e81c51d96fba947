from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional
from urllib import error as urllib_error
from urllib import parse as urllib_parse
from urllib import request as urllib_request

from .core.errors import FormatError, TransportError
from .core.json_repair import loads_partial
from .core.normalize import parse_item_code
from .core.quarter import Quarter
from .core.types import ItemCode

IMAGE_HOST = "https://img.amiami.com"
REGION_LOCK_MARKER = "This product cannot be shipped to"


def _image_url(path: str) -> str:
    return f"{IMAGE_HOST}/{path.lstrip('/')}"


@dataclass(frozen=True)
class CatalogApiConfig:
    domain: str = "api.amiami.com"
    version: str = "v1.0"
    user_key: str = "amiami_dev"
    # the API checks Host even when ``domain`` points somewhere else
    host_header: str = "api.amiami.com"
    origin: str = "https://www.amiami.com"
    lang: str = "eng"
    timeout_seconds: float = 10.0

    @property
    def base_url(self) -> str:
        return f"https://{self.domain}/api/{self.version}"


class Item:
    """A product record returned by the catalog API.

    ``partial`` is set when the body arrived truncated and was recovered
    with :func:`~catalog_fallback.core.json_repair.loads_partial`; any field
    may then be missing.
    """

    def __init__(self, data: dict[str, Any], partial: bool = False):
        self._item: dict[str, Any] = data.get("item") or {}
        self._embedded: dict[str, Any] = data.get("_embedded") or {}
        self.partial = partial

    @property
    def code(self) -> Optional[str]:
        return self._item.get("gcode") or self._item.get("scode")

    @property
    def item_code(self) -> Optional[ItemCode]:
        if not self.code:
            return None
        try:
            return parse_item_code(self.code)
        except FormatError:
            return None

    @property
    def name(self) -> Optional[str]:
        return self._item.get("sname_simple")

    @property
    def price(self) -> Optional[float]:
        return self._item.get("price")

    @property
    def full_price(self) -> Optional[float]:
        return self._item.get("c_price_taxed")

    @property
    def sale_status(self) -> Optional[str]:
        return self._item.get("salestatus")

    @property
    def spec(self) -> Optional[str]:
        return self._item.get("spec")

    @property
    def remarks(self) -> Optional[str]:
        remarks = self._item.get("remarks")
        return remarks or None

    def orderable(self) -> Optional[bool]:
        stock = self._item.get("stock")
        if stock is None:
            return None
        return bool(stock)

    def region_locked(self) -> bool:
        return REGION_LOCK_MARKER in (self.remarks or "")

    def discount_rate(self) -> int:
        return sum(int(self._item.get(f"discountrate{n}") or 0) for n in range(1, 6))

    @property
    def image(self) -> Optional[str]:
        path = self._item.get("main_image_url")
        return _image_url(path) if path else None

    @property
    def images(self) -> list[str]:
        reviews = self._embedded.get("review_images") or []
        return [_image_url(image["image_url"]) for image in reviews if image.get("image_url")]

    @property
    def quarter(self) -> Optional[Quarter]:
        category = self._item.get("image_category")
        if category:
            try:
                return Quarter.parse(str(category).replace("/", ""))
            except FormatError:
                pass
        path = self._item.get("main_image_url") or ""
        parts = path.split("/")
        if len(parts) < 2:
            return None
        try:
            return Quarter.parse(parts[-2])
        except FormatError:
            return None


class CatalogApiClient:
    def __init__(
        self,
        config: CatalogApiConfig | None = None,
        urlopen: Callable[..., Any] = urllib_request.urlopen,
        logger: logging.Logger | None = None,
    ):
        self._config = config or CatalogApiConfig()
        self._urlopen = urlopen
        self._logger = logger or logging.getLogger(__name__)

    def item_url(self, code: str, code_type: str = "gcode") -> str:
        query = urllib_parse.urlencode({code_type: code, "lang": self._config.lang})
        return f"{self._config.base_url}/item?{query}"

    async def item(self, code: str, code_type: str = "gcode") -> Item | None:
        """Fetch one item; ``None`` when the catalog has no such code.

        Raises ``TransportError`` for network failures and ``RecoveryFailed``
        when a truncated body cannot be repaired.
        """
        if code_type not in ("gcode", "scode"):
            raise ValueError(f"unsupported code type: {code_type}")
        url = self.item_url(code, code_type)
        body = await asyncio.to_thread(self._get_blocking, url)
        if body is None:
            return None

        partial = False
        try:
            data = json.loads(body)
        except json.JSONDecodeError:
            # Blocked or rate-limited responses often come back cut short.
            self._logger.warning("Truncated catalog response for %s (%d chars), repairing", code, len(body))
            data = loads_partial(body)
            partial = True

        if not isinstance(data, dict) or not data.get("RSuccess"):
            self._logger.warning("Catalog API reported failure for %s", code)
            return None
        return Item(data, partial=partial)

    def _get_blocking(self, url: str) -> str | None:
        cfg = self._config
        request = urllib_request.Request(
            url,
            headers={
                "X-User-Key": cfg.user_key,
                "Host": cfg.host_header,
                "Origin": cfg.origin,
                "Referer": cfg.origin,
                "User-Agent": "Mozilla/5.0",
            },
        )
        try:
            with self._urlopen(request, timeout=cfg.timeout_seconds) as response:  # noqa: S310
                return response.read().decode("utf-8", errors="replace")
        except urllib_error.HTTPError as exc:
            if exc.code == 404:
                return None
            raise TransportError(f"HTTP {exc.code} from catalog API", url=url, status=exc.code) from exc
        except (urllib_error.URLError, OSError) as exc:
            raise TransportError(f"Catalog API request failed: {exc}", url=url) from exc
