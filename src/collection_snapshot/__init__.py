"""
Collection Snapshot - point-in-time export and incremental restore of
document database collections.

This package provides:
- Timestamped snapshot directories holding one JSON file per collection
- Incremental restore computing inserts, updates and deletes per collection
- A MongoDB document store adapter

Main entry point:
    BackupEngine - primary interface for export and restore

Example usage:
    from collection_snapshot import BackupEngine, MongoDocumentStore
    
    store = MongoDocumentStore.from_uri('mongodb://localhost:27017/', 'clinic')
    engine = BackupEngine(store, './backup')
    
    snapshot_dir = engine.export()
    report = engine.restore()
"""

from .engine import BackupEngine
from .errors import (
    CollectionSnapshotError,
    DeserializationError,
    InvalidDocumentError,
    ConfigurationError,
)
from .config import BackupConfig
from .model.diff import CollectionDiff, CollectionResult, DocumentUpdate, RestoreReport
from .reconcile.reconciler import Reconciler, compute_diff
from .snapshot.writer import SnapshotWriter
from .storage.layout import SnapshotLayout, snapshot_name
from .store.document_store import DocumentStore, MongoDocumentStore

__version__ = '0.1.0'

__all__ = [
    # Main engine
    'BackupEngine',
    
    # Components
    'SnapshotWriter',
    'SnapshotLayout',
    'Reconciler',
    'compute_diff',
    'snapshot_name',
    'DocumentStore',
    'MongoDocumentStore',
    'BackupConfig',
    
    # Errors
    'CollectionSnapshotError',
    'DeserializationError',
    'InvalidDocumentError',
    'ConfigurationError',
    
    # Models
    'CollectionDiff',
    'CollectionResult',
    'DocumentUpdate',
    'RestoreReport',
]
