"""
Test the MongoDB store adapter and identifier coercion.

The pymongo database is replaced by a MagicMock, so these tests check
the exact driver calls without a running server.
"""

from unittest.mock import MagicMock, patch

import pytest
from bson import ObjectId

from collection_snapshot import MongoDocumentStore
from collection_snapshot.store.document_store import USER_COLLECTIONS_FILTER
from collection_snapshot.store.identifiers import (
    identifier_filter,
    identifier_variants,
    identifiers_filter,
    to_native_id,
)

HEX_ID = '507f1f77bcf86cd799439011'


class TestIdentifierCoercion:
    """Test string/ObjectId identifier coercion."""

    def test_hex_string_becomes_objectid(self):
        assert to_native_id(HEX_ID) == ObjectId(HEX_ID)

    def test_other_strings_are_unchanged(self):
        assert to_native_id('A1') == 'A1'
        assert to_native_id('507f1f77bcf86cd79943901') == '507f1f77bcf86cd79943901'

    def test_non_strings_are_unchanged(self):
        oid = ObjectId(HEX_ID)
        assert to_native_id(oid) is oid
        assert to_native_id(7) == 7

    def test_hex_string_matches_both_forms(self):
        assert identifier_variants(HEX_ID) == [ObjectId(HEX_ID), HEX_ID]
        assert identifier_filter(HEX_ID) == {'_id': {'$in': [ObjectId(HEX_ID), HEX_ID]}}

    def test_plain_identifier_filter(self):
        assert identifier_filter('1') == {'_id': '1'}

    def test_many_identifiers_filter(self):
        oid = ObjectId(HEX_ID)
        assert identifiers_filter([oid, 'A1']) == {'_id': {'$in': [oid, 'A1']}}


class TestMongoDocumentStore:
    """Test driver calls issued by the adapter."""

    @pytest.fixture
    def database(self):
        database = MagicMock()
        database.name = 'clinic'
        return database

    @pytest.fixture
    def collection(self, database):
        return database.__getitem__.return_value

    @pytest.fixture
    def store(self, database):
        return MongoDocumentStore(database)

    def test_list_collection_names_skips_system_collections(self, store, database):
        database.list_collection_names.return_value = ['patients', 'appointments']

        assert store.list_collection_names() == ['patients', 'appointments']
        database.list_collection_names.assert_called_once_with(filter=USER_COLLECTIONS_FILTER)

    def test_fetch_documents(self, store, database, collection):
        collection.find.return_value = iter([{'_id': '1'}])

        assert store.fetch_documents('patients') == [{'_id': '1'}]
        database.__getitem__.assert_called_with('patients')

    def test_insert_documents(self, store, collection):
        documents = [{'_id': '2', 'name': 'Jane Smith', 'age': 28}]
        collection.insert_many.return_value.inserted_ids = ['2']

        store.insert_documents('patients', documents)

        collection.insert_many.assert_called_once_with(documents)

    def test_insert_nothing_skips_driver(self, store, collection):
        store.insert_documents('patients', [])

        collection.insert_many.assert_not_called()

    def test_delete_documents(self, store, collection):
        oid = ObjectId(HEX_ID)
        collection.delete_many.return_value.deleted_count = 2

        store.delete_documents('patients', [oid, '1'])

        collection.delete_many.assert_called_once_with({'_id': {'$in': [oid, '1']}})

    def test_update_sets_imported_fields(self, store, collection):
        """Scenario A call shape: filter by id, $set the imported fields."""
        store.update_document('patients', '1', {'name': 'John Doe', 'age': 26})

        collection.update_one.assert_called_once_with(
            {'_id': '1'},
            {'$set': {'name': 'John Doe', 'age': 26}}
        )

    def test_update_unsets_removed_fields(self, store, collection):
        store.update_document('patients', '1', {'name': 'John'}, ['nickname'])

        collection.update_one.assert_called_once_with(
            {'_id': '1'},
            {'$set': {'name': 'John'}, '$unset': {'nickname': ''}}
        )

    def test_update_coerces_hex_identifier(self, store, collection):
        store.update_document('patients', HEX_ID, {'age': 26})

        collection.update_one.assert_called_once_with(
            {'_id': {'$in': [ObjectId(HEX_ID), HEX_ID]}},
            {'$set': {'age': 26}}
        )

    def test_update_with_only_removed_fields(self, store, collection):
        store.update_document('patients', '1', {}, ['name'])

        collection.update_one.assert_called_once_with({'_id': '1'}, {'$unset': {'name': ''}})

    def test_update_with_dotted_field_replaces_document(self, store, collection):
        """Field names that update operators would read as paths use a replacement."""
        store.update_document('patients', '1', {'a.b': 1, 'name': 'John'}, ['old'])

        collection.replace_one.assert_called_once_with({'_id': '1'}, {'a.b': 1, 'name': 'John'})
        collection.update_one.assert_not_called()

    def test_update_removing_dollar_field_replaces_document(self, store, collection):
        store.update_document('patients', '1', {'name': 'John'}, ['$price'])

        collection.replace_one.assert_called_once_with({'_id': '1'}, {'name': 'John'})
        collection.update_one.assert_not_called()

    def test_driver_errors_propagate(self, store, collection):
        collection.insert_many.side_effect = RuntimeError('write rejected')

        with pytest.raises(RuntimeError, match='write rejected'):
            store.insert_documents('patients', [{'_id': '1'}])

    def test_from_uri_builds_client(self):
        with patch('collection_snapshot.store.document_store.MongoClient') as client_class:
            store = MongoDocumentStore.from_uri('mongodb://db.example:27017/', 'clinic')

        client_class.assert_called_once_with('mongodb://db.example:27017/')
        client_class.return_value.__getitem__.assert_called_once_with('clinic')
        assert store.client is client_class.return_value

        store.close()
        client_class.return_value.close.assert_called_once_with()
