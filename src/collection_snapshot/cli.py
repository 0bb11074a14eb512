"""
Command line entry points.

Maps the export and restore commands onto BackupEngine calls and
errors onto exit codes.
"""

from typing import Callable, Optional, Sequence
import argparse
import json
import logging

from pymongo.errors import PyMongoError

from .config import BackupConfig
from .engine import BackupEngine
from .errors import CollectionSnapshotError
from .logging_config import configure_logging
from .store.document_store import DocumentStore, MongoDocumentStore

logger = logging.getLogger(__name__)

StoreFactory = Callable[[BackupConfig], DocumentStore]


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog='collection-snapshot',
        description="Export and incrementally restore document collections",
    )
    parser.add_argument('--uri', help="Override MONGODB_URI for this command")
    parser.add_argument('--database', help="Override MONGODB_DATABASE for this command")
    parser.add_argument('--log-level', help="Override BACKUP_LOG_LEVEL for this command")
    subparsers = parser.add_subparsers(dest='command', required=True)
    
    export_parser = subparsers.add_parser('export', help="Write a new snapshot of every collection")
    export_parser.add_argument('target', nargs='?', help="Backup root (default: BACKUP_ROOT)")
    
    restore_parser = subparsers.add_parser('restore', help="Restore the latest snapshot")
    restore_parser.add_argument('target', nargs='?', help="Backup root (default: BACKUP_ROOT)")
    restore_parser.add_argument('--snapshot', help="Restore this snapshot directory instead of the latest")
    restore_parser.add_argument('--dry-run', action='store_true', help="Report changes without writing")
    
    return parser


def _mongo_store(config: BackupConfig) -> DocumentStore:
    return MongoDocumentStore.from_uri(config.mongodb_uri, config.database)


def main(argv: Optional[Sequence[str]] = None, store_factory: Optional[StoreFactory] = None) -> int:
    """
    Run the CLI.
    
    Returns process exit code: 0 on success (including when there is
    no snapshot to restore), 1 on failure.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    
    try:
        config = BackupConfig.from_env(
            mongodb_uri=args.uri,
            database=args.database,
            log_level=args.log_level,
        )
    except CollectionSnapshotError as e:
        configure_logging()
        logger.error("%s", e)
        return 1
    
    configure_logging(config.log_level)
    store = None
    
    try:
        store = (store_factory or _mongo_store)(config)
        engine = BackupEngine(store, config.backup_root)
        
        if args.command == 'export':
            snapshot_dir = engine.export(args.target)
            print(snapshot_dir)
            return 0
        
        if args.command == 'restore':
            report = engine.restore(args.target, args.snapshot, dry_run=args.dry_run)
            print(json.dumps(report.to_dict(), indent=2))
            return 0
    except (CollectionSnapshotError, OSError, PyMongoError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    finally:
        if isinstance(store, MongoDocumentStore):
            store.close()
    
    parser.error(f"Unsupported command: {args.command}")
    return 2
