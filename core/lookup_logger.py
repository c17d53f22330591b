"""JSONL audit log for weather lookups.

Each city search, device-location lookup, and preset-table row produces one
``LookupRecord``. Records are dataclasses so the schema stays visible in code
while still serializing to flat JSON lines that are easy to grep or load into
a notebook. Device coordinates are rounded before they reach disk.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, IO

logger = logging.getLogger(__name__)

LOOKUP_KINDS = ("city", "coordinates", "preset")


def _utc_now() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


@dataclass
class LookupRecord:
    """Structured schema for one pipeline invocation."""

    timestamp: str
    kind: str
    success: bool
    query: str | None = None
    error_kind: str | None = None
    resolved_name: str | None = None
    country: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    weather_code: int | None = None
    latency_ms: int | None = None

    @classmethod
    def new(
        cls,
        *,
        kind: str,
        success: bool,
        query: str | None = None,
        error_kind: str | None = None,
        resolved_name: str | None = None,
        country: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        weather_code: int | None = None,
        latency_ms: int | None = None,
    ) -> "LookupRecord":
        """Stamp the record with the current UTC time."""

        if kind not in LOOKUP_KINDS:
            raise ValueError(f"Unknown lookup kind '{kind}'")
        return cls(
            timestamp=_utc_now(),
            kind=kind,
            success=success,
            query=query,
            error_kind=error_kind,
            resolved_name=resolved_name,
            country=country,
            latitude=latitude,
            longitude=longitude,
            weather_code=weather_code,
            latency_ms=latency_ms,
        )


class LookupLogger:
    """Append ``LookupRecord`` rows to a size-bounded JSONL file.

    Args:
        log_path: destination file; parent directories are created on demand.
        enabled: when false every call is a no-op.
        max_bytes: rotate once the file would grow past this size (0 disables).
        backup_count: numbered backups kept on rotation (0 truncates instead).
        coordinate_precision: decimals kept for ``coordinates`` lookups.
    """

    def __init__(
        self,
        *,
        log_path: Path,
        enabled: bool = True,
        max_bytes: int = 0,
        backup_count: int = 0,
        coordinate_precision: int = 2,
    ) -> None:
        self._log_path = log_path
        self._enabled = enabled
        self._max_bytes = max_bytes
        self._backup_count = backup_count
        self._coordinate_precision = coordinate_precision
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def log_path(self) -> Path:
        return self._log_path

    def log_lookup(self, record: LookupRecord) -> None:
        """WHAT: append one lookup record to the audit log.

        WHY: city searches, device lookups, and preset rows all report through
        this method, so the enabled gate and the write lock live in one place.
        HOW: skip when disabled, prepare the payload, then append under the
        lock; a failed write is logged and the lookup result is kept.
        """

        if not self._enabled:
            return
        payload = self._prepare_payload(asdict(record))
        try:
            with self._lock:
                self._append_json_line(self._log_path, payload)
        except OSError:
            # Audit logging must never turn a finished lookup into a failure.
            logger.exception("Could not write lookup record to %s", self._log_path)

    def _prepare_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Round device coordinates so precise positions are not stored."""

        if payload.get("kind") != "coordinates":
            return payload
        prepared = dict(payload)
        for key in ("latitude", "longitude"):
            value = prepared.get(key)
            if isinstance(value, (int, float)):
                prepared[key] = round(float(value), self._coordinate_precision)
        return prepared

    def _append_json_line(self, path: Path, payload: Dict[str, Any]) -> None:
        """WHAT: write one payload as a newline-delimited JSON row.

        WHY: every record goes through the same rotation check before it lands.
        HOW: ensure the directory exists, encode to UTF-8 to measure the line,
        rotate if the size limit would be exceeded, and append.
        """

        path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(payload, ensure_ascii=False)
        self._rotate_if_needed(path, len(line.encode("utf-8")) + 1)
        with self._open_file(path) as handle:
            handle.write(line)
            handle.write("\n")

    @staticmethod
    def _open_file(path: Path) -> IO[str]:
        return path.open("a", encoding="utf-8")

    def _rotate_if_needed(self, path: Path, incoming_bytes: int) -> None:
        """WHAT: keep the log under ``max_bytes``.

        WHY: the web API can run for weeks and writes a row per preset city on
        every table refresh.
        HOW: compare current size plus the incoming line against the limit,
        then truncate (no backups) or shift ``.1`` .. ``.N`` and move the live
        file to ``.1``.
        """
        if self._max_bytes <= 0:
            return
        if not path.exists():
            return

        current_size = path.stat().st_size
        if current_size + incoming_bytes <= self._max_bytes:
            return

        if self._backup_count <= 0:
            path.unlink()
            return

        for index in range(self._backup_count - 1, 0, -1):
            src = Path(f"{path}.{index}")
            dst = Path(f"{path}.{index + 1}")
            if src.exists():
                src.replace(dst)

        rotated = Path(f"{path}.1")
        if rotated.exists():
            rotated.unlink()
        path.replace(rotated)


__all__ = ["LOOKUP_KINDS", "LookupRecord", "LookupLogger"]
