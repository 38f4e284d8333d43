# src/platformer/persistence.py
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Optional, Union

from .config import SAVE_PATH_DEFAULT

logger = logging.getLogger(__name__)


class SaveStore:
    """JSON save file. Reads never raise; writes are atomic and never raise."""

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path or SAVE_PATH_DEFAULT).expanduser()

    def load(self) -> Optional[dict]:
        """Return the saved snapshot, or None when missing or malformed."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("could not read save %s: %s", self.path, e)
            return None
        if not isinstance(data, dict):
            logger.warning("ignoring save %s: not an object", self.path)
            return None
        return data

    def save(self, data: dict) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(".json.tmp")
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=0), encoding="utf-8")
            tmp.replace(self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("could not write save %s: %s", self.path, e)
            return False
        return True
