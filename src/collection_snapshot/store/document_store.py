"""
Document store collaborators.

DocumentStore is the interface the snapshot writer and the reconciler
consume. MongoDocumentStore implements it over a pymongo Database.
Every call blocks until the store answers; timeouts belong to the
driver. Driver errors propagate unmodified.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Sequence
import logging

from pymongo import MongoClient

from .identifiers import identifier_filter, identifiers_filter

logger = logging.getLogger(__name__)

# system.* collections belong to the server and cannot be restored into
USER_COLLECTIONS_FILTER = {'name': {'$regex': r'^(?!system\.)'}}


class DocumentStore(ABC):
    """Live document store, addressed by collection name."""

    @abstractmethod
    def list_collection_names(self) -> List[str]:
        """Names of every collection currently present."""
        ...

    @abstractmethod
    def fetch_documents(self, collection: str) -> List[dict]:
        """Full document set of a collection, in store order."""
        ...

    @abstractmethod
    def insert_documents(self, collection: str, documents: Sequence[dict]) -> None:
        """Insert documents verbatim, identifiers included."""
        ...

    @abstractmethod
    def delete_documents(self, collection: str, identifiers: Sequence[Any]) -> None:
        """Delete every document whose identifier is in identifiers."""
        ...

    @abstractmethod
    def update_document(
        self,
        collection: str,
        identifier: Any,
        fields: dict,
        removed: Iterable[str] = (),
    ) -> None:
        """
        Replace the non-identifier fields of one document.

        fields are set; names in removed are dropped from the document.
        """
        ...


class MongoDocumentStore(DocumentStore):
    """
    DocumentStore over a MongoDB database.

    Identifiers passed to delete and update go through the coercion in
    store.identifiers, so string spellings of ObjectIds still match.
    """

    def __init__(self, database, client: Optional[MongoClient] = None):
        """
        Wrap a database handle.

        Args:
            database: pymongo Database
            client: owning client, closed by close() if given
        """
        self.database = database
        self.client = client

    @classmethod
    def from_uri(cls, uri: str, database_name: str, **client_options) -> 'MongoDocumentStore':
        """Connect to a MongoDB deployment and select a database."""
        client = MongoClient(uri, **client_options)
        return cls(client[database_name], client)

    def list_collection_names(self) -> List[str]:
        return list(self.database.list_collection_names(filter=USER_COLLECTIONS_FILTER))

    def fetch_documents(self, collection: str) -> List[dict]:
        return list(self.database[collection].find())

    def insert_documents(self, collection: str, documents: Sequence[dict]) -> None:
        if not documents:
            return
        result = self.database[collection].insert_many(list(documents))
        logger.debug("Inserted %d documents into %s", len(result.inserted_ids), collection)

    def delete_documents(self, collection: str, identifiers: Sequence[Any]) -> None:
        if not identifiers:
            return
        result = self.database[collection].delete_many(identifiers_filter(list(identifiers)))
        logger.debug("Deleted %d documents from %s", result.deleted_count, collection)

    def update_document(
        self,
        collection: str,
        identifier: Any,
        fields: dict,
        removed: Iterable[str] = (),
    ) -> None:
        removed = list(removed)
        if not _usable_as_update_paths(list(fields) + removed):
            # replacement keeps _id and sets exactly the given fields
            self.database[collection].replace_one(identifier_filter(identifier), dict(fields))
            return
        update = {}
        if fields:
            update['$set'] = dict(fields)
        if removed:
            update['$unset'] = {name: '' for name in removed}
        if not update:
            return
        self.database[collection].update_one(identifier_filter(identifier), update)

    def close(self) -> None:
        """Close the owning client, if this store created one."""
        if self.client is not None:
            self.client.close()

    def __repr__(self) -> str:
        return f"MongoDocumentStore(database={self.database.name!r})"


def _usable_as_update_paths(names: List[str]) -> bool:
    """
    Check that field names can be used as $set/$unset keys.

    Update operators read "a.b" as a nested path and reject "$"-prefixed
    names, though MongoDB 5+ documents may hold such fields.
    """
    return not any('.' in name or name.startswith('$') for name in names)
