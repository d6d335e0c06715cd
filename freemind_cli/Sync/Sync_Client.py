# Sync_Client.py
# Description: Reconciles the local record store against the server's registry document
#
# Imports
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
#
# Third-Party Imports
from loguru import logger
#
# Local Imports
from freemind_cli.freemind_api.client import FreemindAPIClient
from freemind_cli.freemind_api.exceptions import APIResponseError, AuthenticationError, SyncInProgressError
from freemind_cli.Registry.Local_State import LocalStateStore
from freemind_cli.Registry.XML_Patch import (
    decode_registry, delete_removed, flatten_single_entry, insert_created_entries,
)
#
#######################################################################################################################
#
# Functions:

class SyncPhase(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    RECONCILING = "reconciling"
    UPLOADING = "uploading"
    MERGING = "merging"
    SYNCED = "synced"
    FAILED = "failed"


@dataclass
class SyncReport:
    entries_deleted: bool = False
    entries_added: bool = False
    new_ids: List[int] = field(default_factory=list)
    uploaded: bool = False
    upload_status: Optional[int] = None
    merged_count: int = 0
    # The server sent no registry document (non-XML or unsuccessful response)
    degraded: bool = False


class RegistrySyncEngine:
    """
    Runs the sync pipeline: fetch, delete tombstoned entries, decode, allocate ids
    for new records, insert them, upload if anything changed, merge remote records
    and mark the store synced.

    A failed pipeline restores the store to its state before the sync and
    re-raises the error; the store stays unsynced.
    """

    def __init__(self, store: LocalStateStore, client: FreemindAPIClient, rng: Optional[random.Random] = None):
        self.store = store
        self.client = client
        self.rng = rng
        self.phase: SyncPhase = SyncPhase.IDLE
        self._running = False

    async def sync(self) -> SyncReport:
        if self._running:
            raise SyncInProgressError("A sync is already running.")
        self._running = True
        snapshot = self.store.snapshot()
        try:
            return await self._run_pipeline()
        except Exception as e:
            self.phase = SyncPhase.FAILED
            self.store.restore(snapshot)
            self.store.mark_unsynced()
            logger.error(f"Sync failed, local changes kept for the next attempt: {e}")
            raise
        finally:
            self._running = False

    async def _run_pipeline(self) -> SyncReport:
        report = SyncReport()

        self.phase = SyncPhase.FETCHING
        logger.info("Fetching new entries...")
        fetched = await self.client.fetch()
        if not fetched.strip():
            logger.warning("Server returned no registry document; nothing was reconciled.")
            report.degraded = True
            self.phase = SyncPhase.IDLE
            return report

        self.phase = SyncPhase.RECONCILING
        logger.info("Evaluating state...")
        report.entries_deleted, document = delete_removed(fetched, self.store)

        remote_records = decode_registry(document)
        existing_ids = {record.id for record in remote_records if not record.removed and record.id is not None}
        # Local ids stay reserved even when the server no longer holds them
        existing_ids |= self.store.get_ids(include_removed=True)

        report.new_ids = self.store.assign_missing_ids(existing_ids, self.rng)
        report.entries_added = bool(report.new_ids)
        if report.entries_added:
            document = insert_created_entries(document, self.store, report.new_ids)

        if report.entries_deleted or report.entries_added:
            self.phase = SyncPhase.UPLOADING
            logger.info("Uploading changes...")
            status = await self.client.upload(document)
            report.upload_status = status
            if status in (401, 403):
                raise AuthenticationError(status, "Server refused the credentials for the registry upload")
            if not 200 <= status < 300:
                raise APIResponseError(status, "Registry upload was rejected")
            report.uploaded = True

        self.phase = SyncPhase.MERGING
        report.merged_count = self.store.merge_remote(remote_records)

        self.store.mark_synced()
        self.phase = SyncPhase.SYNCED
        logger.info(f"Sync done: deleted={report.entries_deleted}, added={len(report.new_ids)}, "
                    f"merged={report.merged_count}")
        return report

    async def live_get_by_id(self, entry_id: int) -> str:
        """Reads one entry straight from the server, flattened to "tag: text" lines."""
        document = await self.client.get_by_id(entry_id)
        return flatten_single_entry(document)

#
# End of Sync_Client.py
########################################################################################################################
