"""File store adapter for small JSON state documents (exhaustion set, history)."""
import json
import os
import tempfile
from pathlib import Path
from typing import Any


class LocalJsonFileStore:
    """Reads and writes JSON documents under a base directory; key -> path.

    Writes go to a temp file in the same directory and are moved into place with
    os.replace, so readers see either the old document or the new one.
    """

    def __init__(self, base_dir: str | Path) -> None:
        self._base = Path(base_dir)

    def path_for(self, key: str) -> Path:
        return self._base / key

    def read_json(self, key: str) -> Any | None:
        """Return the parsed document, or None when it does not exist. Raises ValueError on corrupt JSON."""
        path = self.path_for(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return json.loads(raw)

    def write_json(self, key: str, data: Any) -> Path:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except BaseException:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise
        return path

