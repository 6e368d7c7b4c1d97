"""File-based persistence helpers for the JSON document stores."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from ..config import settings

logger = logging.getLogger(__name__)


class FileStorage:
    """Thin wrapper around the data root for reading and writing JSON documents."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        return self.root / f"{name}.json"

    def modified_at(self, name: str) -> int | None:
        try:
            return self.path_for(name).stat().st_mtime_ns
        except OSError:
            return None

    def read_json(self, name: str, default: Any = None) -> Any:
        path = self.path_for(name)
        if not path.exists():
            return default
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(f"Unreadable store document {path}, using default: {exc}")
            return default

    def write_json(self, name: str, data: Any, *, indent: int = 2) -> Path:
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)
        os.replace(tmp_path, path)
        return path
