"""
Document helpers.

A document is a plain mapping with one distinguished identifier field.
"""

from typing import Any, Dict, Iterable, List, Optional

from ..errors import InvalidDocumentError

ID_FIELD = '_id'


def identifier_key(document: dict) -> Optional[str]:
    """
    Get the comparison key of a document's identifier.
    
    Identifiers are compared by their string form, so an ObjectId and its
    24-hex string spelling address the same document.
    
    Returns None if the document has no identifier.
    """
    value = document.get(ID_FIELD)
    if value is None:
        return None
    key = str(value)
    return key or None


def non_identifier_fields(document: dict) -> Dict[str, Any]:
    """Get all fields except the identifier, in document order."""
    return {name: value for name, value in document.items() if name != ID_FIELD}


def index_by_identifier(documents: Iterable[Any], collection: str = None) -> Dict[str, dict]:
    """
    Index documents by identifier key.
    
    Documents without an identifier are left out. If two documents share
    a key, the later one wins.
    
    Raises InvalidDocumentError if an entry is not a mapping.
    """
    index = {}
    for document in documents:
        if not isinstance(document, dict):
            raise InvalidDocumentError(
                f"expected a mapping, got {type(document).__name__}",
                collection
            )
        key = identifier_key(document)
        if key is not None:
            index[key] = document
    return index


def removed_field_names(live: dict, imported: dict) -> List[str]:
    """Names of non-identifier fields present in live but absent from imported."""
    return [name for name in live if name != ID_FIELD and name not in imported]
