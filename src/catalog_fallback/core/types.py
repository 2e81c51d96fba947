from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .quarter import Quarter


@dataclass(frozen=True)
class CodeReference:
    code: int
    quarter: Quarter
    preowned: bool = False


@dataclass(frozen=True)
class ItemCode:
    code: int
    preowned: bool = False
    prefix: Optional[str] = None


@dataclass
class ProbeResult:
    status: str
    url: Optional[str] = None
    payload: Optional[bytes] = None

    @property
    def found(self) -> bool:
        return self.status == "found"


@dataclass
class SearchResult:
    status: str
    code: int
    reference: Optional[CodeReference] = None
    payload: Optional[bytes] = None
    attempts: int = 0
    reason: Optional[str] = None


@dataclass(frozen=True)
class SearchConfig:
    max_attempts: int = 16
    backoff_seconds: float = 0.25
