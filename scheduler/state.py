"""
Agenda State Management.

This module acts as the 'Memory' of the system. It owns:
1. The WeeklySchedule (working hours, breaks, consultation length).
2. The BlockRegistry (time-off entries).
3. The link to durable storage: load at startup, save after every mutation,
   and wholesale replacement when another instance changes the records.
"""

import json
import logging
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from models import BlockEntry, WeeklySchedule
from .blocks import BlockRegistry
from .storage import BLOCKS_KEY, SCHEDULE_KEY, MemoryStorage

logger = logging.getLogger(__name__)

_BLOCK_LIST = TypeAdapter(List[BlockEntry])


class AgendaState:
    """
    Injected state container shared by the resolver, the slot generator and
    the booking engine. Never a module-level global.
    """

    def __init__(self, storage=None):
        self.storage = storage if storage is not None else MemoryStorage()
        self.schedule: WeeklySchedule = WeeklySchedule()
        self.blocks: BlockRegistry = BlockRegistry()

    # --- Persistence ---

    def load(self) -> None:
        """
        Read both records. A missing record keeps the default; a malformed one
        is logged and replaced by the default instead of crashing.
        """
        raw_schedule = self.storage.get(SCHEDULE_KEY)
        if raw_schedule:
            schedule = self._parse_schedule(raw_schedule)
            self.schedule = schedule if schedule is not None else WeeklySchedule()

        raw_blocks = self.storage.get(BLOCKS_KEY)
        if raw_blocks:
            blocks = self._parse_blocks(raw_blocks)
            self.blocks.replace_all(blocks if blocks is not None else [])

        logger.info(f"Agenda state loaded ({len(self.blocks)} blocks)")

    def save(self) -> None:
        self.save_schedule()
        self.save_blocks()

    def save_schedule(self) -> None:
        self.storage.set(SCHEDULE_KEY, self.schedule.model_dump_json())

    def save_blocks(self) -> None:
        # Dates serialize as ISO 'YYYY-MM-DD' strings.
        self.storage.set(BLOCKS_KEY, _BLOCK_LIST.dump_json(self.blocks.all()).decode('utf-8'))

    # --- Cross-instance sync ---

    def on_external_change(self, key: str, raw: Optional[str]) -> bool:
        """
        Apply a record written by another instance (last writer wins).
        Returns True if in-memory state was replaced.
        """
        if not raw:
            return False

        if key == SCHEDULE_KEY:
            schedule = self._parse_schedule(raw)
            if schedule is None:
                return False
            self.schedule = schedule
            logger.info("Schedule replaced by external change")
            return True

        if key == BLOCKS_KEY:
            blocks = self._parse_blocks(raw)
            if blocks is None:
                return False
            self.blocks.replace_all(blocks)
            logger.info(f"Blocks replaced by external change ({len(blocks)} entries)")
            return True

        return False

    # --- Parsing ---

    def _parse_schedule(self, raw: str) -> Optional[WeeklySchedule]:
        try:
            return WeeklySchedule.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Stored schedule is invalid, ignoring it: {e}")
            return None

    def _parse_blocks(self, raw: str) -> Optional[List[BlockEntry]]:
        try:
            return _BLOCK_LIST.validate_json(raw)
        except ValidationError as e:
            logger.error(f"Stored block list is invalid, ignoring it: {e}")
            return None

    def to_dict(self) -> dict:
        return {
            SCHEDULE_KEY: json.loads(self.schedule.model_dump_json()),
            BLOCKS_KEY: json.loads(_BLOCK_LIST.dump_json(self.blocks.all())),
        }
