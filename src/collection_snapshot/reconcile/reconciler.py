"""
Snapshot reconciliation.

Brings live collections in line with a snapshot by computing, per
collection, the inserts, updates and deletes that separate them and
applying those writes to the store.
"""

from pathlib import Path
from typing import List
import logging

from ..integrity.canonical import canonical_json_str, structurally_equal
from ..model.diff import CollectionDiff, CollectionResult, DocumentUpdate
from ..model.document import (
    ID_FIELD,
    index_by_identifier,
    non_identifier_fields,
    removed_field_names,
)
from ..storage.document_files import read_document_set
from ..storage.layout import SnapshotLayout
from ..store.document_store import DocumentStore

logger = logging.getLogger(__name__)


def compute_diff(collection: str, imported: List[dict], live: List[dict]) -> CollectionDiff:
    """
    Compute the writes that turn the live set into the imported set.

    Documents are matched by the string form of their identifier.
    Documents without an identifier take no part and are left untouched.

    - insert: imported documents with no live counterpart, verbatim
    - delete: live documents with no imported counterpart
    - update: matched documents whose non-identifier content differs,
      compared structurally with mapping key order ignored
    """
    imported_index = index_by_identifier(imported, collection)
    live_index = index_by_identifier(live, collection)

    diff = CollectionDiff(collection)

    for key, document in imported_index.items():
        live_document = live_index.get(key)

        if live_document is None:
            diff.to_insert.append(document)
            continue

        fields = non_identifier_fields(document)
        if structurally_equal(fields, non_identifier_fields(live_document)):
            continue

        diff.to_update.append(DocumentUpdate(
            document[ID_FIELD],
            fields,
            removed_field_names(live_document, document),
        ))

    for key, live_document in live_index.items():
        if key not in imported_index:
            diff.to_delete.append(live_document)

    return diff


class Reconciler:
    """
    Applies snapshots to a live document store.

    Collections are processed one at a time. There is no transaction and
    no rollback: a failing store call propagates immediately, leaving any
    writes already issued in place and later collections unprocessed.
    """

    def __init__(self, store: DocumentStore):
        """
        Initialize reconciler.

        Args:
            store: live document store to write to
        """
        self.store = store

    def reconcile(self, snapshot_path: str | Path, dry_run: bool = False) -> List[CollectionResult]:
        """
        Reconcile every collection file in a snapshot directory.

        Args:
            snapshot_path: snapshot directory to restore from
            dry_run: if True, only report what would change

        Returns list of per-collection results in file name order.

        Raises DeserializationError if a collection file is malformed;
        no further collections are processed.
        """
        results = []

        for path in SnapshotLayout.list_collection_files(Path(snapshot_path)):
            results.append(self.reconcile_file(path, dry_run=dry_run))

        return results

    def reconcile_file(self, path: Path, dry_run: bool = False) -> CollectionResult:
        """Reconcile the collection stored in one snapshot file."""
        collection = SnapshotLayout.collection_name(path)
        imported = read_document_set(path)
        return self.reconcile_collection(collection, imported, dry_run=dry_run)

    def reconcile_collection(
        self,
        collection: str,
        imported: List[dict],
        dry_run: bool = False
    ) -> CollectionResult:
        """
        Reconcile one collection against an imported document set.

        Reads the live set, computes the diff and applies it unless
        dry_run is set or there is nothing to do.
        """
        live = self.store.fetch_documents(collection)
        diff = compute_diff(collection, imported, live)

        if diff.is_empty():
            logger.info("Collection '%s' is already up-to-date", collection)
            return CollectionResult(diff, applied=False)

        counts = diff.counts()

        if dry_run:
            logger.info(
                "Collection '%s' would change: insert %d, update %d, delete %d",
                collection, counts['inserted'], counts['updated'], counts['deleted']
            )
            return CollectionResult(diff, applied=False)

        self.apply(diff)

        logger.info(
            "Updated collection '%s': inserted %d, updated %d, deleted %d",
            collection, counts['inserted'], counts['updated'], counts['deleted']
        )
        return CollectionResult(diff, applied=True)

    def apply(self, diff: CollectionDiff) -> None:
        """
        Issue the writes of a diff: inserts, then deletes, then updates.

        The sets are disjoint by identifier, so the order only shows in
        logs and in what a failure leaves behind.
        """
        if diff.to_insert:
            self.store.insert_documents(diff.collection, diff.to_insert)

        if diff.to_delete:
            self.store.delete_documents(diff.collection, diff.delete_identifiers())

        for update in diff.to_update:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "Updating %s in %s: %s",
                    update.identifier, diff.collection, canonical_json_str(update.to_dict())
                )
            self.store.update_document(
                diff.collection,
                update.identifier,
                update.fields,
                update.removed,
            )
