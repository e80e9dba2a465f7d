"""Download and read TMDb daily ID exports.

TMDb publishes one gzipped, line-delimited JSON file per entity kind and day
at ``<base_url>/<kind>_ids_MM_DD_YYYY.json.gz``. Each line is a small object,
for example ``{"adult":false,"id":603,"original_title":"The Matrix","popularity":85.2,"video":false}``.
Files show up around 08:00 UTC, so earlier requests for "today" get a 403 and
fall back to the previous day.
"""

from __future__ import annotations

import asyncio
import gzip
import re
import shutil
from datetime import UTC, date, datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from cinematch.adapters.http_resilience import ResilientClient
from cinematch.domain.gap_analysis.tiers import (
    count_entries,
    popularity_distribution,
    sample_by_popularity,
)

from .schema import TmdbExportLine
from .translator import translate_export_line

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from cinematch.config.http_resilience import ResilienceConfig
    from cinematch.config.tmdb import ExportConfig
    from cinematch.domain.gap_analysis.tiers import ExportCounts, SampleTier
    from cinematch.domain.model import EntityKind, ExportEntry

log = getLogger(__name__)

_EXPORT_NAME_RE = re.compile(r"(movie|person)_ids_(\d{2})_(\d{2})_(\d{4})\.json")
_FALLBACK_STATUSES = frozenset({403, 404})
_BYTES_PER_MB = 1024 * 1024


class ExportUnavailableError(RuntimeError):
    """Raised when no export could be fetched within the fallback window."""

    def __init__(self, kind: EntityKind, last_tried: date) -> None:
        super().__init__(
            f"TMDb {kind.value} export not available after fallback attempts "
            f"(last tried {last_tried.isoformat()})"
        )
        self.kind = kind
        self.last_tried = last_tried


def export_filename(kind: EntityKind, day: date) -> str:
    return f"{kind.value}_ids_{day:%m_%d_%Y}.json.gz"


def _utc_today() -> date:
    return datetime.now(UTC).date()


class TmdbDailyExport:
    """``ExportRepository`` backed by files.tmdb.org."""

    def __init__(
        self,
        config: ExportConfig,
        *,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._today = today

    def export_url(self, kind: EntityKind, day: date) -> str:
        return f"{self._config.base_url.rstrip('/')}/{export_filename(kind, day)}"

    def default_path(self, kind: EntityKind, day: date) -> Path:
        return self._config.dest_dir / export_filename(kind, day).removesuffix(".gz")

    def download(self, kind: EntityKind, *, day: date | None = None) -> Path:
        """Fetch and decompress an export, stepping back one day on 403/404."""

        current = day or self._today()
        last_tried = current
        self._config.dest_dir.mkdir(parents=True, exist_ok=True)
        attempts = max(self._config.fallback_days, 1)
        for _ in range(attempts):
            url = self.export_url(kind, current)
            gz_path = self._config.dest_dir / export_filename(kind, current)
            log.info("Downloading TMDb export: %s", url)
            if asyncio.run(self._fetch(url, gz_path)):
                json_path = self.default_path(kind, current)
                try:
                    _decompress(gz_path, json_path)
                finally:
                    gz_path.unlink(missing_ok=True)
                log.info("Downloaded and decompressed to: %s", json_path)
                return json_path
            previous = current - timedelta(days=1)
            log.info("Export for %s not available, trying %s", current, previous)
            last_tried, current = current, previous

        log.error("TMDb export not available after fallback attempts. Last tried: %s", last_tried)
        raise ExportUnavailableError(kind, last_tried)

    def stream(
        self,
        path: Path,
        kind: EntityKind,
        *,
        skip_video: bool = True,
        skip_adult: bool = True,
        min_popularity: float | None = None,
    ) -> Iterator[ExportEntry]:
        for entry in self._iter_entries(path, kind):
            if skip_video and entry.is_video:
                continue
            if skip_adult and entry.is_adult:
                continue
            if min_popularity is not None and entry.popularity < min_popularity:
                continue
            yield entry

    def count_entries(self, path: Path, kind: EntityKind) -> ExportCounts:
        return count_entries(self._iter_entries(path, kind))

    def popularity_distribution(self, path: Path, kind: EntityKind) -> dict[str, int]:
        """Finer popularity buckets over non-video, non-adult entries."""

        return popularity_distribution(self.stream(path, kind))

    def sample_by_popularity(
        self,
        path: Path,
        kind: EntityKind,
        *,
        per_tier: int = 5,
    ) -> dict[SampleTier, list[ExportEntry]]:
        return sample_by_popularity(self.stream(path, kind), per_tier=per_tier)

    def export_date(self, path: Path) -> date | None:
        match = _EXPORT_NAME_RE.search(path.name)
        if match is None:
            return None
        _, month, day, year = match.groups()
        try:
            return date(int(year), int(month), int(day))
        except ValueError:
            return None

    def _iter_entries(self, path: Path, kind: EntityKind) -> Iterator[ExportEntry]:
        with path.open("rb") as handle:
            for line_number, raw in enumerate(handle, start=1):
                line = raw.strip()
                if not line:
                    continue
                try:
                    parsed = TmdbExportLine.model_validate_json(line)
                except ValidationError as exc:
                    log.warning(
                        "Skipping malformed %s export line %s in %s: %s",
                        kind.value,
                        line_number,
                        path.name,
                        exc.errors(include_url=False)[0]["msg"],
                    )
                    continue
                yield translate_export_line(parsed)

    async def _fetch(self, url: str, destination: Path) -> bool:
        async with self._client_factory(self._config.resilience) as client:
            response = await client.get(url)
        if response.status_code in _FALLBACK_STATUSES:
            log.info("TMDb export request returned %s", response.status_code)
            return False
        response.raise_for_status()
        destination.write_bytes(response.content)
        log.info(
            "Downloaded %.2f MB to %s",
            len(response.content) / _BYTES_PER_MB,
            destination,
        )
        return True


def _decompress(source: Path, destination: Path) -> None:
    """Gunzip next to ``destination`` and move it into place only once complete."""

    partial = destination.with_name(f"{destination.name}.part")
    try:
        with gzip.open(source, "rb") as compressed, partial.open("wb") as plain:
            shutil.copyfileobj(compressed, plain)
        partial.replace(destination)
    except (OSError, EOFError) as exc:
        log.error("Failed to decompress %s: %s", source, exc)
        raise
    finally:
        partial.unlink(missing_ok=True)
    log.info("Decompressed size: %.2f MB", destination.stat().st_size / _BYTES_PER_MB)
