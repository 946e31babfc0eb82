import asyncio
import json
import os
import tempfile
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional

from grantgate.storage.base import KeyValueStore


class JsonFileStore(KeyValueStore):
    """
    Stores a whole namespace as a single JSON document on disk.

    Layout of `<directory>/<namespace>.json`:
        {"<key>": <value>, ...}

    The document is read and written wholesale on every operation.
    A missing file is an empty namespace; an unreadable or malformed one
    is a storage failure.

    Operations on one file are serialized across all stores in the
    process, since every write rewrites the whole document.
    """

    _path_locks: Dict[Path, Lock] = {}
    _registry_lock: Lock = Lock()

    def __init__(self, namespace: str, directory: str | os.PathLike):
        super().__init__(namespace)
        self.path = (Path(directory) / f"{namespace}.json").resolve()
        self._lock = self._lock_for(self.path)

    @classmethod
    def _lock_for(cls, path: Path) -> Lock:
        with cls._registry_lock:
            if path not in cls._path_locks:
                cls._path_locks[path] = Lock()
            return cls._path_locks[path]

    # ─────────────────────────────────────────────
    # Backend hooks
    # ─────────────────────────────────────────────

    async def _get(self, key: str) -> Optional[Any]:
        document = await asyncio.to_thread(self._read_locked)
        return document.get(key)

    async def _set(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._update, key, value)

    async def _delete(self, key: str) -> None:
        await asyncio.to_thread(self._update, key, None, True)

    async def _keys(self) -> List[str]:
        document = await asyncio.to_thread(self._read_locked)
        return list(document)

    # ─────────────────────────────────────────────
    # Internal helpers (blocking)
    # ─────────────────────────────────────────────

    def _read_locked(self) -> Dict[str, Any]:
        with self._lock:
            return self._read()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}

        with self.path.open("r", encoding="utf-8") as fh:
            document = json.load(fh)

        if not isinstance(document, dict):
            raise ValueError(
                f"{self.path} must contain a JSON object, "
                f"got {type(document).__name__}"
            )
        return document

    def _update(self, key: str, value: Any, remove: bool = False) -> None:
        with self._lock:
            document = self._read()

            if remove:
                document.pop(key, None)
            else:
                document[key] = value

            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write(document)

    def _write(self, document: Dict[str, Any]) -> None:
        tmp = tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            delete=False,
        )
        try:
            with tmp:
                json.dump(document, tmp)
            os.replace(tmp.name, self.path)
        except Exception:
            os.unlink(tmp.name)
            raise
