"""
Durable key-value storage for agenda configuration.

Two named records are kept: the weekly schedule and the block list.
Values are raw JSON strings; parsing belongs to AgendaState.
"""

import logging
import os
from typing import Dict, Optional

logger = logging.getLogger(__name__)

SCHEDULE_KEY = "agenda_config"
BLOCKS_KEY = "agenda_blocks"


class MemoryStorage:
    """Process-local storage (tests, throwaway sessions)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, raw: str) -> None:
        self._data[key] = raw


class JsonFileStorage:
    """One '<key>.json' file per record inside a directory."""

    def __init__(self, directory: str):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        """Raw record, or None when it is missing or cannot be read."""
        path = self._path(key)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not read {key} from {path}, ignoring it: {e}")
            return None

    def set(self, key: str, raw: str) -> None:
        # Write-then-rename so a crash never leaves a half-written record.
        path = self._path(key)
        tmp_path = f"{path}.tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            f.write(raw)
        os.replace(tmp_path, path)
        logger.debug(f"Saved {key} to {path}")
