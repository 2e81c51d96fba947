from __future__ import annotations

from typing import Protocol

from .quarter import Quarter
from .types import ProbeResult


class ExistenceProbePort(Protocol):
    async def check(self, code: int, quarter: Quarter) -> ProbeResult:
        ...
