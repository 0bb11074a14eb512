"""
Diff object model.

A diff is the transient set of writes that brings one live collection
in line with its snapshot. It is computed and discarded within one
reconciliation pass.
"""

from typing import Any, Dict, List, Optional

from .document import ID_FIELD


class DocumentUpdate:
    """
    Targeted update of one live document.

    Carries:
    - the identifier of the document to update
    - the imported non-identifier fields to set
    - names of live fields the imported document no longer has
    """

    def __init__(self, identifier: Any, fields: dict, removed: Optional[List[str]] = None):
        self.identifier = identifier
        self.fields = dict(fields)
        self.removed = list(removed or [])

    def to_dict(self) -> dict:
        obj = {
            ID_FIELD: self.identifier,
            'set': self.fields,
        }
        if self.removed:
            obj['unset'] = self.removed
        return obj

    def __eq__(self, other) -> bool:
        if not isinstance(other, DocumentUpdate):
            return NotImplemented
        return (
            self.identifier == other.identifier
            and self.fields == other.fields
            and self.removed == other.removed
        )

    def __repr__(self) -> str:
        return (
            f"DocumentUpdate(identifier={self.identifier!r}, "
            f"fields={sorted(self.fields)}, removed={self.removed})"
        )


class CollectionDiff:
    """
    Inserts, updates and deletes for one collection.

    The three sets are disjoint by identifier, so the order they are
    applied in does not affect the outcome.
    """

    def __init__(
        self,
        collection: str,
        to_insert: Optional[List[dict]] = None,
        to_update: Optional[List[DocumentUpdate]] = None,
        to_delete: Optional[List[dict]] = None,
    ):
        self.collection = collection
        self.to_insert = list(to_insert or [])
        self.to_update = list(to_update or [])
        self.to_delete = list(to_delete or [])

    def is_empty(self) -> bool:
        """Check if the live collection already matches the snapshot."""
        return not (self.to_insert or self.to_update or self.to_delete)

    def delete_identifiers(self) -> List[Any]:
        """Identifiers of the live documents to delete, as read from the store."""
        return [document[ID_FIELD] for document in self.to_delete]

    def counts(self) -> Dict[str, int]:
        return {
            'inserted': len(self.to_insert),
            'updated': len(self.to_update),
            'deleted': len(self.to_delete),
        }

    def to_dict(self) -> dict:
        return {
            'collection': self.collection,
            'insert': self.to_insert,
            'update': [update.to_dict() for update in self.to_update],
            'delete': self.delete_identifiers(),
        }

    def __repr__(self) -> str:
        counts = self.counts()
        return (
            f"CollectionDiff(collection={self.collection!r}, "
            f"insert={counts['inserted']}, update={counts['updated']}, "
            f"delete={counts['deleted']})"
        )


class CollectionResult:
    """Outcome of reconciling one collection."""

    def __init__(self, diff: CollectionDiff, applied: bool):
        self.collection = diff.collection
        self.inserted = len(diff.to_insert)
        self.updated = len(diff.to_update)
        self.deleted = len(diff.to_delete)
        self.applied = applied

    @property
    def up_to_date(self) -> bool:
        return self.inserted == 0 and self.updated == 0 and self.deleted == 0

    def to_dict(self) -> dict:
        return {
            'collection': self.collection,
            'inserted': self.inserted,
            'updated': self.updated,
            'deleted': self.deleted,
            'up_to_date': self.up_to_date,
            'applied': self.applied,
        }

    def __repr__(self) -> str:
        return (
            f"CollectionResult(collection={self.collection!r}, "
            f"inserted={self.inserted}, updated={self.updated}, "
            f"deleted={self.deleted}, applied={self.applied})"
        )


class RestoreReport:
    """
    Outcome of one restore run.

    snapshot_path is None when no snapshot was found; nothing was applied.
    """

    def __init__(self, snapshot_path=None, results: Optional[List[CollectionResult]] = None):
        self.snapshot_path = snapshot_path
        self.results = list(results or [])

    @property
    def snapshot_found(self) -> bool:
        return self.snapshot_path is not None

    def get(self, collection: str) -> Optional[CollectionResult]:
        """Get the result for a collection by name."""
        for result in self.results:
            if result.collection == collection:
                return result
        return None

    def totals(self) -> Dict[str, int]:
        return {
            'inserted': sum(result.inserted for result in self.results),
            'updated': sum(result.updated for result in self.results),
            'deleted': sum(result.deleted for result in self.results),
        }

    def to_dict(self) -> dict:
        return {
            'snapshot_path': str(self.snapshot_path) if self.snapshot_path else None,
            'collections': [result.to_dict() for result in self.results],
            'totals': self.totals(),
        }
