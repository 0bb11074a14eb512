"""
Snapshot writer.

Exports every collection of a live store into a new timestamp-named
snapshot directory.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional
import logging

from ..storage.document_files import write_document_set
from ..storage.layout import SnapshotLayout, snapshot_name
from ..store.document_store import DocumentStore

logger = logging.getLogger(__name__)


class SnapshotWriter:
    """
    Writes point-in-time snapshots of a document store.
    
    Each collection is read and written in turn; there is no transaction
    across collections, so concurrent writers may leave a snapshot that
    mixes states from different instants.
    """
    
    def __init__(self, store: DocumentStore, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize writer.
        
        Args:
            store: live document store to read from
            clock: returns the current local time; datetime.now by default
        """
        self.store = store
        self.clock = clock or datetime.now
    
    def create_snapshot(self, destination_root: str | Path) -> Path:
        """
        Export all collections into a new snapshot directory.
        
        Args:
            destination_root: directory that holds snapshots; created if missing
        
        Returns:
            Path: absolute path of the snapshot directory
        
        Raises OSError unmodified if the directory or a file cannot be written.
        """
        layout = SnapshotLayout(destination_root)
        snapshot_dir = layout.create_snapshot_dir(snapshot_name(self.clock()))
        
        for collection in self.store.list_collection_names():
            documents = self.store.fetch_documents(collection)
            path = layout.collection_path(snapshot_dir, collection)
            write_document_set(path, documents)
            logger.info(
                "Saved collection '%s' to %s (%d documents)",
                collection, path, len(documents)
            )
        
        logger.info("Backup completed: %s", snapshot_dir)
        return snapshot_dir
