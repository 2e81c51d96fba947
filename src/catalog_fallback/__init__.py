from .catalog_api import CatalogApiClient, CatalogApiConfig, Item
from .core.errors import FormatError, RecoveryFailed, TransportError
from .core.json_repair import loads_partial, repair_json
from .core.quarter import Quarter
from .core.search import QuarterSearch
from .core.types import CodeReference, SearchConfig, SearchResult
from .http_probe import ImageProbe, ProbeConfig
from .known_codes import parse_known_codes, seed_known_codes
from .lookup import CatalogLookup, LookupConfig, LookupResult

__all__ = [
    "CatalogLookup",
    "LookupConfig",
    "LookupResult",
    "CatalogApiClient",
    "CatalogApiConfig",
    "Item",
    "ImageProbe",
    "ProbeConfig",
    "QuarterSearch",
    "SearchConfig",
    "SearchResult",
    "Quarter",
    "CodeReference",
    "FormatError",
    "RecoveryFailed",
    "TransportError",
    "repair_json",
    "loads_partial",
    "parse_known_codes",
    "seed_known_codes",
]
