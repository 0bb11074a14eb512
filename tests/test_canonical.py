"""
Test canonical forms.

Verifies that logically equal values always compare equal.
"""

from bson import ObjectId

from collection_snapshot.integrity.canonical import (
    canonical_form,
    canonical_json_str,
    structurally_equal,
)


class TestCanonicalForm:
    """Test order-normalized structural comparison."""
    
    def test_mapping_key_order_is_ignored(self):
        assert canonical_form({'a': 1, 'b': 2}) == canonical_form({'b': 2, 'a': 1})
    
    def test_nested_mapping_key_order_is_ignored(self):
        left = {'outer': [{'x': 1, 'y': {'p': None, 'q': 'z'}}]}
        right = {'outer': [{'y': {'q': 'z', 'p': None}, 'x': 1}]}
        assert structurally_equal(left, right)
    
    def test_sequence_order_is_kept(self):
        assert not structurally_equal([1, 2], [2, 1])
    
    def test_bool_and_number_differ(self):
        assert not structurally_equal({'v': True}, {'v': 1})
        assert not structurally_equal({'v': False}, {'v': 0})
    
    def test_int_and_float_of_same_value_are_equal(self):
        assert structurally_equal({'v': 26}, {'v': 26.0})
    
    def test_string_and_number_differ(self):
        assert not structurally_equal({'v': '1'}, {'v': 1})
    
    def test_null_and_missing_differ(self):
        assert not structurally_equal({'v': None}, {})
    
    def test_nan_equals_nan(self):
        assert structurally_equal({'v': float('nan')}, {'v': float('nan')})
        assert not structurally_equal({'v': float('nan')}, {'v': 0.0})
    
    def test_canonical_form_is_hashable(self):
        hash(canonical_form({'a': [1, {'b': ObjectId('507f1f77bcf86cd799439011')}]}))


class TestCanonicalJson:
    """Test the canonical JSON rendering used in logs."""
    
    def test_keys_sorted_without_whitespace(self):
        assert canonical_json_str({'b': 1, 'a': [1, 2]}) == '{"a":[1,2],"b":1}'
    
    def test_bson_values_render(self):
        rendered = canonical_json_str({'_id': ObjectId('507f1f77bcf86cd799439011')})
        assert rendered == '{"_id":{"$oid":"507f1f77bcf86cd799439011"}}'
