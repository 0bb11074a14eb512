"""
Filesystem layout for snapshot directories.

Implements timestamp-named snapshot directories holding one JSON file
per collection.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

SNAPSHOT_PREFIX = 'backup_'
COLLECTION_EXTENSION = '.json'
SNAPSHOT_TIME_FORMAT = '%m%d%Y_%H%M%S'


def snapshot_name(moment: datetime) -> str:
    """
    Build the snapshot directory name for a moment in local time.
    
    Format is backup_MMDDYYYY_HHMMSS, fixed width and zero padded,
    so that name order is chronological order within a year.
    """
    return SNAPSHOT_PREFIX + moment.strftime(SNAPSHOT_TIME_FORMAT)


class SnapshotLayout:
    """
    Manages the on-disk layout of snapshots.
    
    Layout:
        root/
            backup_MMDDYYYY_HHMMSS/
                <collection>.json    # array of documents
    """
    
    def __init__(self, root: str | Path):
        """Initialize layout at given root."""
        self.root = Path(root).resolve()
    
    def snapshot_path(self, name: str) -> Path:
        """Get path of a snapshot directory by name."""
        return self.root / name
    
    def create_snapshot_dir(self, name: str) -> Path:
        """
        Create a snapshot directory and any missing parents.
        
        Idempotent. OSError (permissions, disk full) propagates unmodified.
        """
        path = self.snapshot_path(name)
        path.mkdir(parents=True, exist_ok=True)
        return path
    
    def list_snapshot_names(self) -> List[str]:
        """
        List snapshot directory names, oldest first.
        
        Only immediate subdirectories carrying the snapshot prefix count.
        Raises OSError if root cannot be listed.
        """
        names = [
            entry.name for entry in self.root.iterdir()
            if entry.is_dir() and entry.name.startswith(SNAPSHOT_PREFIX)
        ]
        return sorted(names)
    
    def select_latest(self) -> Optional[Path]:
        """
        Select the most recent snapshot directory.
        
        Returns None if there are no snapshots. This is not an error.
        """
        names = self.list_snapshot_names()
        
        if not names:
            logger.info("No backups found.")
            return None
        
        return self.snapshot_path(names[-1])
    
    @staticmethod
    def collection_path(snapshot_dir: Path, collection: str) -> Path:
        """
        Get the file path for a collection inside a snapshot.
        
        Raises ValueError if the name cannot be used as a file name.
        """
        if not collection or collection.startswith('.') or '/' in collection or '\\' in collection:
            raise ValueError(f"Collection name cannot be used as a file name: {collection!r}")
        return Path(snapshot_dir) / (collection + COLLECTION_EXTENSION)
    
    @staticmethod
    def list_collection_files(snapshot_dir: Path) -> List[Path]:
        """
        List collection files directly inside a snapshot, sorted by name.
        
        Hidden files, other files and subdirectories are skipped.
        """
        files = []
        for entry in Path(snapshot_dir).iterdir():
            if entry.name.startswith('.'):
                logger.debug("Skipping hidden %s", entry)
            elif entry.is_file() and entry.suffix == COLLECTION_EXTENSION:
                files.append(entry)
            else:
                logger.debug("Skipping %s", entry)
        return sorted(files, key=lambda path: path.name)
    
    @staticmethod
    def collection_name(path: Path) -> str:
        """Derive the collection name from a collection file path."""
        return Path(path).name[:-len(COLLECTION_EXTENSION)]
