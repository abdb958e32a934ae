"""
Source Resolver

Finds the raw shipment records for a loadboard session. Attempts run one
after another, first non-empty result wins:

    1. snapshot     - last records saved in the key-value store
    2. json         - shipments.json
    3. spreadsheet  - shipments.xlsx (header row detected heuristically)
    4. empty        - nothing found; the UI asks the user to paste data

A failing attempt (missing file, bad JSON, no header row, timeout) is logged
and skipped. resolve() itself never raises. Blocking reads run on a pool
owned by one resolve() call and abandoned on return, so a hung read costs
at most its attempt timeout.

USAGE
-----
    resolver = SourceResolver(FileStore(SNAPSHOT_DIR))
    result = asyncio.run(resolver.resolve())
    if result.needs_paste:
        result = resolver.accept_paste(text)   # may raise InvalidPasteError
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from concurrent.futures import Executor, ThreadPoolExecutor
from functools import partial
from dataclasses import dataclass, field
from pathlib import Path

from ..config import (
    ATTEMPT_TIMEOUT_S,
    SHIPMENTS_JSON_PATH,
    SHIPMENTS_XLSX_PATH,
    SNAPSHOT_KEY,
)
from .errors import InvalidPasteError, SourceUnavailableError
from .spreadsheet import load_spreadsheet
from .store import KeyValueStore

logger = logging.getLogger(__name__)

SOURCE_SNAPSHOT = "snapshot"
SOURCE_JSON = "json"
SOURCE_SPREADSHEET = "spreadsheet"
SOURCE_PASTE = "paste"
SOURCE_EMPTY = "empty"


@dataclass(frozen=True)
class ResolveResult:
    records: list = field(default_factory=list)
    source: str = SOURCE_EMPTY

    @property
    def needs_paste(self) -> bool:
        return not self.records


# =============================================================================
# PAYLOAD PARSING
# =============================================================================

def extract_records(payload) -> list | None:
    """A JSON list, or the `data` list of a JSON object; None otherwise."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    return None


def parse_records_text(text: str) -> list:
    """
    Parse serialized records, raising SourceUnavailableError on any problem.

    Used for snapshot and JSON resource attempts, where an unusable payload
    only means "try the next source".
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise SourceUnavailableError(f"invalid JSON: {e}") from e

    records = extract_records(payload)
    if records is None:
        raise SourceUnavailableError(f"expected a list of shipments, got {type(payload).__name__}")
    return records


def parse_pasted(text: str) -> list:
    """
    Validate pasted text: a JSON array, or an object with a `data` array.

    Raises:
        InvalidPasteError: Naming the JSON error or the unexpected shape
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidPasteError(f"Invalid JSON: {e}") from e

    records = extract_records(payload)
    if records is None:
        raise InvalidPasteError(
            "Invalid JSON: expected an array of shipments or an object with a 'data' array"
        )
    return records


async def _run_blocking(pool: Executor, func, *args, **kwargs):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(pool, partial(func, *args, **kwargs))


# =============================================================================
# RESOLVER
# =============================================================================

class SourceResolver:
    """
    Fallback chain over the loadboard's data sources.

    Args:
        store: Key-value store holding the snapshot slot
        json_path: JSON resource (None skips the attempt)
        spreadsheet_path: Spreadsheet resource (None skips the attempt)
        snapshot_key: Snapshot slot name in `store`
        attempt_timeout: Seconds per attempt (None waits indefinitely)
    """

    def __init__(
        self,
        store: KeyValueStore,
        json_path: Path | None = SHIPMENTS_JSON_PATH,
        spreadsheet_path: Path | None = SHIPMENTS_XLSX_PATH,
        snapshot_key: str = SNAPSHOT_KEY,
        attempt_timeout: float | None = ATTEMPT_TIMEOUT_S,
    ):
        self.store = store
        self.json_path = json_path
        self.spreadsheet_path = spreadsheet_path
        self.snapshot_key = snapshot_key
        self.attempt_timeout = attempt_timeout

    # -------------------------------------------------------------------------
    # ATTEMPTS
    # -------------------------------------------------------------------------

    async def _from_snapshot(self, pool: Executor) -> list:
        text = await _run_blocking(pool, self.store.get, self.snapshot_key)
        if text is None:
            raise SourceUnavailableError(f"no snapshot under '{self.snapshot_key}'")
        return parse_records_text(text)

    async def _from_json(self, pool: Executor) -> list:
        if self.json_path is None:
            raise SourceUnavailableError("no JSON resource configured")
        text = await _run_blocking(pool, Path(self.json_path).read_text, encoding="utf-8")
        return parse_records_text(text)

    async def _from_spreadsheet(self, pool: Executor) -> list:
        if self.spreadsheet_path is None:
            raise SourceUnavailableError("no spreadsheet resource configured")
        records = await _run_blocking(pool, load_spreadsheet, Path(self.spreadsheet_path))
        if not records:
            raise SourceUnavailableError("no header row found in spreadsheet")
        return records

    def _attempts(self) -> list[tuple[str, Callable[[Executor], Awaitable[list]]]]:
        return [
            (SOURCE_SNAPSHOT, self._from_snapshot),
            (SOURCE_JSON, self._from_json),
            (SOURCE_SPREADSHEET, self._from_spreadsheet),
        ]

    async def _try(
        self,
        source: str,
        attempt: Callable[[Executor], Awaitable[list]],
        pool: Executor,
    ) -> list:
        try:
            records = await asyncio.wait_for(attempt(pool), timeout=self.attempt_timeout)
        except Exception as e:
            logger.info("Source '%s' unavailable: %s", source, str(e) or type(e).__name__)
            return []
        if not records:
            logger.info("Source '%s' returned no records", source)
        return records

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------

    async def resolve(self) -> ResolveResult:
        """Run the fallback chain once. Never raises."""
        attempts = self._attempts()
        pool = ThreadPoolExecutor(max_workers=len(attempts), thread_name_prefix="loadboard-source")
        try:
            for source, attempt in attempts:
                records = await self._try(source, attempt, pool)
                if records:
                    logger.info("Loaded %d records from %s", len(records), source)
                    return ResolveResult(records=records, source=source)
        finally:
            # Timed-out reads keep their thread; do not wait for them
            pool.shutdown(wait=False, cancel_futures=True)

        logger.warning("No shipment source available; waiting for pasted data")
        return ResolveResult()

    def accept_paste(self, text: str) -> ResolveResult:
        """
        Turn pasted text into a load result.

        Raises:
            InvalidPasteError: If the text is not a JSON list of shipments
        """
        records = parse_pasted(text)
        logger.info("Accepted %d pasted records", len(records))
        return ResolveResult(records=records, source=SOURCE_PASTE)

    def save_snapshot(self, records: list) -> None:
        """Store the raw records so the next session starts from them."""
        self.store.set(self.snapshot_key, json.dumps(records, ensure_ascii=False))
        logger.info("Saved snapshot '%s' (%d records)", self.snapshot_key, len(records))

    def clear_snapshot(self) -> None:
        self.store.clear(self.snapshot_key)
        logger.info("Cleared snapshot '%s'", self.snapshot_key)
