"""
Backup Engine.

Main entry point coordinating export and restore.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional
import logging

from .config import DEFAULT_BACKUP_ROOT
from .model.diff import RestoreReport
from .reconcile.reconciler import Reconciler
from .snapshot.writer import SnapshotWriter
from .storage.layout import SnapshotLayout
from .store.document_store import DocumentStore

logger = logging.getLogger(__name__)


class BackupEngine:
    """
    Main engine for snapshot export and restore.
    
    This is the primary interface for:
    - Exporting every collection into a new snapshot directory
    - Finding the latest snapshot under a backup root
    - Restoring a snapshot into the live store incrementally
    
    The store handle is passed in; the engine never opens connections.
    """
    
    def __init__(
        self,
        store: DocumentStore,
        backup_root: str | Path = DEFAULT_BACKUP_ROOT,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize engine.
        
        Args:
            store: live document store
            backup_root: default directory holding snapshots
            clock: returns current local time, for snapshot naming
        """
        self.store = store
        self.backup_root = Path(backup_root)
        self.writer = SnapshotWriter(store, clock)
        self.reconciler = Reconciler(store)
    
    def _root(self, target: Optional[str | Path]) -> Path:
        return Path(target) if target is not None else self.backup_root
    
    # ========== Export ==========
    
    def export(self, target: Optional[str | Path] = None) -> Path:
        """
        Export all collections into a new snapshot.
        
        Args:
            target: backup root to write into; engine default if None
        
        Returns:
            Path: created snapshot directory
        """
        return self.writer.create_snapshot(self._root(target))
    
    # ========== Snapshot Selection ==========
    
    def list_snapshots(self, target: Optional[str | Path] = None) -> List[str]:
        """List snapshot names under a backup root, oldest first."""
        return SnapshotLayout(self._root(target)).list_snapshot_names()
    
    def latest_snapshot(self, target: Optional[str | Path] = None) -> Optional[Path]:
        """Get the latest snapshot under a backup root, or None."""
        return SnapshotLayout(self._root(target)).select_latest()
    
    # ========== Restore ==========
    
    def restore(
        self,
        target: Optional[str | Path] = None,
        snapshot_path: Optional[str | Path] = None,
        dry_run: bool = False
    ) -> RestoreReport:
        """
        Restore the live store from a snapshot.
        
        Args:
            target: backup root to select the latest snapshot from
            snapshot_path: explicit snapshot directory; skips selection
            dry_run: if True, report changes without writing
        
        Returns RestoreReport. Its snapshot_path is None when no snapshot
        was found, in which case nothing was applied.
        """
        if snapshot_path is None:
            snapshot_path = self.latest_snapshot(target)
            if snapshot_path is None:
                return RestoreReport()
            logger.info("Loading latest backup: %s", snapshot_path)
        else:
            snapshot_path = Path(snapshot_path).resolve()
            logger.info("Loading backup: %s", snapshot_path)
        
        results = self.reconciler.reconcile(snapshot_path, dry_run=dry_run)
        return RestoreReport(snapshot_path, results)
    
    def __repr__(self) -> str:
        return f"BackupEngine(store={self.store!r}, backup_root={self.backup_root})"
