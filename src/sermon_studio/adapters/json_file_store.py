"""JSON file backed key-value storage."""

import json
from dataclasses import dataclass
from pathlib import Path

from sermon_studio.services.display_settings import KeyValueStore


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Keeps string values in a single JSON object on disk."""

    path: Path

    def get_item(self, key: str) -> str | None:
        """Return the value for a key, or None if the file or key is missing."""
        data = self._read()
        value = data.get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        """Store a value, rewriting the file."""
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        tmp_path.replace(self.path)

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
