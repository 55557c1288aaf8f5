"""Resolution of word-list identifiers to decoded list content."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import requests

from ..config import ListConfig
from ..core.dictionary import parse_records
from ..core.models import Entry
from ..errors import ListResolutionError

logger = logging.getLogger(__name__)


class ListResolver:
    """Map list ids to bundled files, local paths or HTTP URLs and load them."""

    def __init__(
        self,
        sources: Mapping[str, str],
        data_dir: Optional[Path] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.sources: Dict[str, str] = dict(sources)
        self.data_dir = data_dir
        self.timeout = timeout
        self._session = session

    @classmethod
    def from_config(cls, config: ListConfig) -> "ListResolver":
        return cls(config.sources, data_dir=config.data_dir, timeout=config.http_timeout)

    def order(self, list_ids: Iterable[str]) -> List[str]:
        """Return the known ids among ``list_ids`` in configured load order."""

        wanted = set(list_ids)
        return [list_id for list_id in self.sources if list_id in wanted]

    def location(self, list_id: str) -> str:
        try:
            return self.sources[list_id]
        except KeyError:
            raise ListResolutionError(list_id, "unknown list id") from None

    def resolve(self, list_id: str) -> Any:
        location = self.location(list_id)
        if location.startswith(("http://", "https://")):
            return self._fetch(list_id, location)
        return self._read(list_id, location)

    def _fetch(self, list_id: str, url: str) -> Any:
        session = self._session or requests.Session()
        try:
            response = session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise ListResolutionError(list_id, str(exc)) from exc
        except ValueError as exc:
            raise ListResolutionError(list_id, f"invalid JSON from {url}") from exc
        finally:
            if self._session is None:
                session.close()

    def _read(self, list_id: str, location: str) -> Any:
        path = Path(location)
        if path.is_absolute():
            target: Any = path
        elif self.data_dir is not None:
            target = self.data_dir / path
        else:
            target = resources.files("hanzi_overlay") / "data"
            for part in path.parts:
                target = target / part
        try:
            return json.loads(target.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ListResolutionError(list_id, f"cannot read {location}: {exc}") from exc
        except ValueError as exc:
            raise ListResolutionError(list_id, f"invalid JSON in {location}") from exc


def load_all_entries(resolver: ListResolver, list_ids: Optional[Iterable[str]] = None) -> List[Entry]:
    """Collect entries from every list for searching, skipping lists that fail."""

    entries: List[Entry] = []
    ids = resolver.order(list_ids) if list_ids is not None else list(resolver.sources)
    for list_id in ids:
        try:
            entries.extend(parse_records(resolver.resolve(list_id), list_id))
        except ListResolutionError as exc:
            logger.debug("%s", exc)
    return entries


__all__ = ["ListResolver", "load_all_entries"]
