# Local_State.py
# Description: In-memory store of registry records plus the "synced" flag
#
# Imports
from typing import Any, Iterable, Iterator, List, Optional, Set, Tuple
#
# 3rd-Party Imports
from loguru import logger
#
# Local Imports
from freemind_cli.Constants import SYNCED_MARKER, UNSYNCED_MARKER
from freemind_cli.freemind_api.exceptions import FreemindError
from freemind_cli.Registry.Entry_Record import Record
from freemind_cli.Registry.Id_Allocator import allocate_id
#
########################################################################################################################
#
# Functions:

_UNCHANGED: Any = object()


class DuplicateRecordError(FreemindError, ValueError):
    """Raised when a record would share its identifier with another live record."""
    pass


class LocalStateStore:
    """
    Owns the local, insertion-ordered collection of records.

    `synced` is False while local mutations are pending upload. It is cleared by
    every user mutation and only set again by a completed sync pipeline.
    """

    def __init__(self, records: Optional[Iterable[Record]] = None):
        self._records: List[Record] = []
        self.synced: bool = False
        for record in records or []:
            self._append(record)

    # --- Read access ---

    @property
    def records(self) -> Tuple[Record, ...]:
        return tuple(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def get_ids(self, include_removed: bool = False) -> Set[int]:
        return {
            record.id for record in self._records
            if record.id is not None and (include_removed or not record.removed)
        }

    def find(self, entry_id: int) -> Optional[Record]:
        """Returns the live (non-removed) record with this identifier, if any."""
        for record in self._records:
            if record.id == entry_id and not record.removed:
                return record
        return None

    def filter(self, text: str) -> List[Record]:
        return [record for record in self._records if record.matches(text)]

    @property
    def modified_marker(self) -> str:
        return SYNCED_MARKER if self.synced else UNSYNCED_MARKER

    # --- User mutations ---

    def push(self, record: Optional[Record]) -> bool:
        """Appends a user-created record. `None` (a cancelled dialog) is ignored."""
        if record is None:
            return False
        self._append(record)
        self.mark_unsynced()
        logger.debug(f"Added record '{record.title}' (id={record.id})")
        return True

    def remove(self, entry_id: int) -> bool:
        """Tombstones the record; it is deleted from the server on the next sync."""
        record = self.find(entry_id)
        if record is None:
            logger.info(f"Cannot remove entry {entry_id}: no live record with that id.")
            return False
        record.removed = True
        self.mark_unsynced()
        logger.debug(f"Marked entry {entry_id} as removed")
        return True

    def edit(self, entry_id: int, title: Optional[str] = None, description: Optional[str] = None,
             due: Any = _UNCHANGED, tags: Optional[List[str]] = None) -> Optional[Record]:
        """
        Changes a live record and returns the record carrying the new values.

        The registry protocol only knows deletions and insertions, so a record the
        server already has is tombstoned and replaced by an unidentified copy; the
        next sync removes the old entry and uploads the copy under a fresh id.
        """
        record = self.find(entry_id)
        if record is None:
            logger.info(f"Cannot edit entry {entry_id}: no live record with that id.")
            return None

        changes = {}
        if title is not None:
            changes["title"] = title
        if description is not None:
            changes["description"] = description
        if due is not _UNCHANGED:
            changes["due"] = due
        if tags is not None:
            changes["tags"] = list(tags)
        if not changes:
            return record

        replacement = Record(
            id=None,
            title=changes.get("title", record.title),
            description=changes.get("description", record.description),
            due=changes.get("due", record.due),
            tags=changes.get("tags", list(record.tags)),
        )
        record.removed = True
        self._records.append(replacement)
        self.mark_unsynced()
        logger.debug(f"Edited entry {entry_id}: tombstoned and queued replacement '{replacement.title}'")
        return replacement

    # --- Sync engine hooks ---

    def discard_tombstone(self, entry_id: int) -> Optional[Record]:
        """Drops the removed record with this identifier from the store and returns it."""
        for position, record in enumerate(self._records):
            if record.id == entry_id and record.removed:
                return self._records.pop(position)
        return None

    def assign_missing_ids(self, existing_ids: Set[int], rng=None) -> List[int]:
        """Allocates ids for every record lacking one; `existing_ids` is extended in place."""
        new_ids: List[int] = []
        for record in self._records:
            if record.id is None:
                record.id = allocate_id(existing_ids, rng)
                new_ids.append(record.id)
        return new_ids

    def merge_remote(self, remote_records: Iterable[Record]) -> int:
        """Appends remote records not already present locally. Returns how many were added."""
        added = 0
        for remote in remote_records:
            if any(remote == local for local in self._records):
                continue
            self._records.append(remote)
            added += 1
        return added

    def mark_synced(self) -> None:
        self.synced = True

    def mark_unsynced(self) -> None:
        self.synced = False

    def snapshot(self) -> Tuple[List[Record], bool]:
        return [record.model_copy(deep=True) for record in self._records], self.synced

    def restore(self, snapshot: Tuple[List[Record], bool]) -> None:
        records, synced = snapshot
        self._records = [record.model_copy(deep=True) for record in records]
        self.synced = synced

    # --- Internal ---

    def _append(self, record: Record) -> None:
        if not record.removed and record.id is not None and self.find(record.id) is not None:
            raise DuplicateRecordError(f"A live record with id {record.id} already exists.")
        self._records.append(record)

#
# End of Local_State.py
########################################################################################################################
