from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable
from urllib import error as urllib_error
from urllib import request as urllib_request

from .core.errors import TransportError
from .core.normalize import pad_code
from .core.quarter import Quarter
from .core.types import ProbeResult


@dataclass(frozen=True)
class ProbeConfig:
    base_url: str = "https://img.amiami.com/images/product/main"
    item_prefix: str = "FIGURE"
    method: str = "GET"
    timeout_seconds: float = 8.0
    user_agent: str = "Mozilla/5.0"


class ImageProbe:
    """Existence check for catalog images, keyed by ``(code, quarter)``.

    ``GET`` probes return the image bytes as the payload; ``HEAD`` probes
    only confirm existence.
    """

    def __init__(
        self,
        config: ProbeConfig | None = None,
        urlopen: Callable[..., Any] = urllib_request.urlopen,
        logger: logging.Logger | None = None,
    ):
        self._config = config or ProbeConfig()
        self._urlopen = urlopen
        self._logger = logger or logging.getLogger(__name__)

    def image_url(self, code: int, quarter: Quarter | str) -> str:
        cfg = self._config
        return f"{cfg.base_url.rstrip('/')}/{quarter}/{cfg.item_prefix}-{pad_code(code)}.jpg"

    async def check(self, code: int, quarter: Quarter) -> ProbeResult:
        url = self.image_url(code, quarter)
        return await asyncio.to_thread(self._check_blocking, url)

    def _check_blocking(self, url: str) -> ProbeResult:
        cfg = self._config
        request = urllib_request.Request(url, method=cfg.method, headers={"User-Agent": cfg.user_agent})
        try:
            with self._urlopen(request, timeout=cfg.timeout_seconds) as response:  # noqa: S310
                status = int(getattr(response, "status", 200))
                payload = response.read() if cfg.method == "GET" else None
        except urllib_error.HTTPError as exc:
            if exc.code == 404:
                self._logger.debug("Probe miss: %s", url)
                return ProbeResult(status="miss", url=url)
            raise TransportError(f"HTTP {exc.code} probing {url}", url=url, status=exc.code) from exc
        except (urllib_error.URLError, OSError) as exc:
            raise TransportError(f"Probe failed for {url}: {exc}", url=url) from exc

        if status == 404:
            return ProbeResult(status="miss", url=url)
        if not 200 <= status < 300:
            raise TransportError(f"HTTP {status} probing {url}", url=url, status=status)
        self._logger.debug("Probe hit: %s", url)
        return ProbeResult(status="found", url=url, payload=payload)
