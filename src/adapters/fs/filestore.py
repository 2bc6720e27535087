import os
from pathlib import Path


class FileSystemStore:
    """Flat key -> bytes store rooted at one directory."""

    def __init__(self, base_path: str | Path):
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _safe_path(self, key: str) -> Path:
        # Prevent traversal
        target = (self.base_path / key).resolve()
        if target == self.base_path or not target.is_relative_to(self.base_path):
            raise ValueError(f"Path traversal attempt detected: {key}")
        return target

    def save(self, key: str, data: bytes) -> str:
        """Save bytes and return the key relative to the store root."""
        target = self._safe_path(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as f:
            f.write(data)
        return target.relative_to(self.base_path).as_posix()

    def get(self, key: str) -> bytes:
        """Retrieve bytes by key. Raises FileNotFoundError."""
        target = self._safe_path(key)
        if not target.is_file():
            raise FileNotFoundError(f"File not found: {key}")
        with open(target, "rb") as f:
            return f.read()

    def exists(self, key: str) -> bool:
        return self._safe_path(key).is_file()

    def delete(self, key: str) -> None:
        target = self._safe_path(key)
        if target.exists():
            os.remove(target)
