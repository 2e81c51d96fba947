from .errors import FormatError, RecoveryFailed, TransportError
from .estimator import estimate_quarter, initial_guess
from .json_repair import loads_partial, repair_json
from .normalize import format_item_code, pad_code, parse_item_code
from .ports import ExistenceProbePort
from .quarter import Quarter
from .search import QuarterSearch, zigzag_offset
from .types import CodeReference, ItemCode, ProbeResult, SearchConfig, SearchResult

__all__ = [
    "QuarterSearch",
    "Quarter",
    "CodeReference",
    "ItemCode",
    "ProbeResult",
    "SearchConfig",
    "SearchResult",
    "ExistenceProbePort",
    "FormatError",
    "RecoveryFailed",
    "TransportError",
    "estimate_quarter",
    "initial_guess",
    "repair_json",
    "loads_partial",
    "parse_item_code",
    "pad_code",
    "format_item_code",
    "zigzag_offset",
]
