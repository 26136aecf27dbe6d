from __future__ import annotations

import base64
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """
    Abstract key -> bytes store (local disk, browser store, ...).
    """

    @abstractmethod
    def write_bytes(self, path: str, data: bytes) -> None:
        pass

    @abstractmethod
    def read_bytes(self, path: str) -> bytes:
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove `path`; missing paths are ignored."""
        pass


class LocalFileSystemStorage(StorageBackend):
    """
    Local filesystem implementation rooted at a directory.
    """

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _resolve(self, path: str) -> Path:
        # Prevent path traversal attacks
        full_path = (self.root / path).resolve()
        if not full_path.is_relative_to(self.root):
            raise ValueError(f"Access denied: {path}")
        return full_path

    def write_bytes(self, path: str, data: bytes) -> None:
        p = self._resolve(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)

    def read_bytes(self, path: str) -> bytes:
        return self._resolve(path).read_bytes()

    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    def delete(self, path: str) -> None:
        self._resolve(path).unlink(missing_ok=True)


class BrowserStoreStorage(StorageBackend):
    """
    Storage over the JSON dict held by a `dcc.Store(storage_type="local")`.

    Values are kept as text so the store round-trips through the browser;
    anything that is not valid UTF-8 is base64 encoded under a "b64:" prefix.
    Callbacks read `.data` back out and return it as the store's new value.
    """

    def __init__(self, data: Optional[Any] = None):
        if data is not None and not isinstance(data, Mapping):
            # tampered or corrupt localStorage entry; treat as empty
            logger.warning("Discarding non-object browser store", extra={"type": type(data).__name__})
            data = None
        self.data: Dict[str, str] = dict(data or {})

    def write_bytes(self, path: str, data: bytes) -> None:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            text = None
        if text is None or text.startswith("b64:"):
            text = "b64:" + base64.b64encode(data).decode("ascii")
        self.data[path] = text

    def read_bytes(self, path: str) -> bytes:
        value = self.data[path]
        if not isinstance(value, str):
            raise TypeError(f"Stored value for {path!r} is not text")
        if value.startswith("b64:"):
            return base64.b64decode(value[4:])
        return value.encode("utf-8")

    def exists(self, path: str) -> bool:
        return path in self.data

    def delete(self, path: str) -> None:
        self.data.pop(path, None)
