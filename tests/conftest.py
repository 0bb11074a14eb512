"""
Shared fixtures.

InMemoryDocumentStore stands in for a live database and records every
write it receives.
"""

import copy
import logging

import pytest

from collection_snapshot.store.document_store import DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed document store that records writes."""
    
    def __init__(self, collections=None):
        self.collections = {
            name: copy.deepcopy(list(documents))
            for name, documents in (collections or {}).items()
        }
        self.calls = []
    
    def list_collection_names(self):
        return list(self.collections)
    
    def fetch_documents(self, collection):
        return copy.deepcopy(self.collections.get(collection, []))
    
    def insert_documents(self, collection, documents):
        self.calls.append(('insert', collection, copy.deepcopy(list(documents))))
        self.collections.setdefault(collection, []).extend(copy.deepcopy(list(documents)))
    
    def delete_documents(self, collection, identifiers):
        self.calls.append(('delete', collection, list(identifiers)))
        keys = {str(identifier) for identifier in identifiers}
        self.collections[collection] = [
            document for document in self.collections.get(collection, [])
            if str(document.get('_id')) not in keys
        ]
    
    def update_document(self, collection, identifier, fields, removed=()):
        removed = list(removed)
        self.calls.append(('update', collection, identifier, copy.deepcopy(fields), removed))
        for document in self.collections.get(collection, []):
            if str(document.get('_id')) == str(identifier):
                for name in removed:
                    document.pop(name, None)
                document.update(copy.deepcopy(fields))
                return
    
    def calls_for(self, collection, kind=None):
        """Recorded calls for one collection, optionally of one kind."""
        return [
            call for call in self.calls
            if call[1] == collection and (kind is None or call[0] == kind)
        ]


class FailingInsertStore(InMemoryDocumentStore):
    """Store whose inserts are rejected."""
    
    def insert_documents(self, collection, documents):
        self.calls.append(('insert', collection, list(documents)))
        raise RuntimeError(f"insert rejected for {collection}")


@pytest.fixture
def patients():
    return [{'_id': '1', 'name': 'John Doe', 'age': 25}]


@pytest.fixture
def appointments():
    return [{'_id': 'A1', 'patientId': '1', 'date': '2025-10-28'}]


@pytest.fixture
def store(patients, appointments):
    """Live store holding a patients and an appointments collection."""
    return InMemoryDocumentStore({
        'patients': patients,
        'appointments': appointments,
    })


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by CLI runs so they do not outlive the test."""
    yield
    package_logger = logging.getLogger('collection_snapshot')
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
