"""
Block Registry.

Holds the user's time-off entries (single or recurring). Entries are never
merged, deduplicated or expired; they only go away through remove().
"""

import logging
from datetime import date as date_type
from typing import Any, Dict, Iterable, List, Union

from pydantic import ValidationError

from models import BlockEntry
from .constraints import ValidationFailure

logger = logging.getLogger(__name__)


class BlockRegistry:
    """Ordered collection of BlockEntry records keyed by id."""

    def __init__(self, entries: Iterable[BlockEntry] = ()):
        self._entries: List[BlockEntry] = list(entries)

    def add(self, data: Union[BlockEntry, Dict[str, Any]]) -> BlockEntry:
        """
        Validate and store a new block. A fresh id is always assigned.
        Raises ValidationFailure (naming the offending field) on bad input.
        """
        if isinstance(data, BlockEntry):
            data = data.model_dump(exclude={"id"})
        else:
            data = {k: v for k, v in data.items() if k != "id"}

        try:
            entry = BlockEntry(**data)
        except ValidationError as e:
            raise ValidationFailure.from_pydantic(e) from e

        self._entries.append(entry)
        logger.info(
            f"Block added: {entry.date} {entry.start:%H:%M}-{entry.end:%H:%M} "
            f"({entry.kind.value}) - {entry.reason}"
        )
        return entry

    def remove(self, block_id: str) -> None:
        """Remove by id. Unknown ids are ignored."""
        self._entries = [e for e in self._entries if e.id != block_id]

    def matches(self, entry: BlockEntry, day: date_type) -> bool:
        return entry.matches(day)

    def for_date(self, day: date_type) -> List[BlockEntry]:
        """All blocks (single or recurring) that apply on the given date."""
        return [e for e in self._entries if e.matches(day)]

    def all(self) -> List[BlockEntry]:
        return list(self._entries)

    def replace_all(self, entries: Iterable[BlockEntry]) -> None:
        """Swap the whole registry (used on load and on external sync)."""
        self._entries = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))
