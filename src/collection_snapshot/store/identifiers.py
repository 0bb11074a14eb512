"""
Identifier coercion at the store boundary.

Snapshot files may spell an ObjectId identifier either natively or as a
plain 24-hex string. Lookups against the live store go through here so
both spellings find the same document.
"""

from typing import Any, List

from bson import ObjectId


def to_native_id(value: Any) -> Any:
    """
    Coerce an identifier to the store's native type.
    
    A string that is a valid ObjectId becomes an ObjectId; anything
    else is returned unchanged.
    """
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


def identifier_variants(value: Any) -> List[Any]:
    """
    Get every stored form an identifier may take.
    
    A 24-hex string may be stored either as an ObjectId or as the
    string itself; an externally assigned string that happens to look
    like an ObjectId must still match.
    """
    native = to_native_id(value)
    if native is value:
        return [value]
    return [native, value]


def identifier_filter(value: Any) -> dict:
    """Build a query filter matching one document by identifier."""
    variants = identifier_variants(value)
    if len(variants) == 1:
        return {'_id': variants[0]}
    return {'_id': {'$in': variants}}


def identifiers_filter(values: List[Any]) -> dict:
    """Build a query filter matching any of several identifiers."""
    variants = []
    for value in values:
        variants.extend(identifier_variants(value))
    return {'_id': {'$in': variants}}
