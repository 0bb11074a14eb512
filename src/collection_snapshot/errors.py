"""
Error types for snapshot export and restore operations.

All errors are explicit and never silent. Filesystem and database driver
errors are propagated unmodified; the types below cover the failures
that belong to this package.
"""


class CollectionSnapshotError(Exception):
    """Base exception for all collection snapshot errors."""
    pass


class DeserializationError(CollectionSnapshotError):
    """Raised when a snapshot collection file is not a well-formed document set."""
    
    def __init__(self, path: str, reason: str, cause: Exception = None):
        self.path = path
        self.reason = reason
        self.cause = cause
        msg = f"Cannot load document set from {path}: {reason}"
        if cause:
            msg += f"\nCause: {cause}"
        super().__init__(msg)


class InvalidDocumentError(CollectionSnapshotError):
    """Raised when a document set entry is not a mapping."""
    
    def __init__(self, reason: str, collection: str = None):
        self.reason = reason
        self.collection = collection
        msg = f"Invalid document: {reason}"
        if collection:
            msg += f" (collection: {collection})"
        super().__init__(msg)


class ConfigurationError(CollectionSnapshotError):
    """Raised when a configuration value is missing or invalid."""
    
    def __init__(self, setting: str, reason: str):
        self.setting = setting
        self.reason = reason
        super().__init__(f"Invalid configuration for {setting}: {reason}")
