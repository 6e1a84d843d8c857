"""Local pick bookmarks kept in a JSON file.

The file maps a key to a list of ids. Ids are never checked against the
server: resolving a pick list filters a freshly fetched collection, so ids for
deleted items just stop showing up.
"""

import json
from pathlib import Path
from typing import Any, Iterable, List, Optional

from marketplace.client.filters import select_by_ids
from marketplace.core.config import get_settings
from marketplace.core.logging import get_logger

logger = get_logger(__name__)

PICKED_PROJECTS = "pickedProjects"
PICKED_DEVELOPERS = "pickedDevelopers"


class PickStore:
    """Key -> list of ids, persisted after every change. Single process only."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or get_settings().picks_file).expanduser()

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable picks file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, key: str) -> List[str]:
        value = self._load().get(key, [])
        if not isinstance(value, list):
            return []
        return [str(item) for item in value]

    def add(self, key: str, item_id: str) -> bool:
        """Append ``item_id`` unless already picked. Returns True when it was added."""
        data = self._load()
        ids = self.get(key)
        if item_id in ids:
            return False
        data[key] = [*ids, item_id]
        self._save(data)
        return True

    def remove(self, key: str, item_id: str) -> bool:
        data = self._load()
        ids = self.get(key)
        if item_id not in ids:
            return False
        data[key] = [i for i in ids if i != item_id]
        self._save(data)
        return True

    def resolve(self, key: str, items: Iterable[Any]) -> List[Any]:
        return select_by_ids(items, self.get(key))
