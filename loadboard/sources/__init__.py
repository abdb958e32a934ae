"""
Sources Package

Where raw shipment records come from:
- store:       key-value snapshot slot (memory / file backed)
- spreadsheet: header detection and row mapping for the xlsx export
- resolver:    fallback chain snapshot -> json -> spreadsheet -> paste
"""

from .errors import InvalidPasteError, SourceUnavailableError
from .resolver import ResolveResult, SourceResolver, parse_pasted
from .spreadsheet import grid_to_records, load_spreadsheet
from .store import FileStore, KeyValueStore, MemoryStore

__all__ = [
    "FileStore",
    "InvalidPasteError",
    "KeyValueStore",
    "MemoryStore",
    "ResolveResult",
    "SourceResolver",
    "SourceUnavailableError",
    "grid_to_records",
    "load_spreadsheet",
    "parse_pasted",
]
