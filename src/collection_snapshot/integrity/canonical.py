"""
Canonical forms for deterministic document comparison.

Ensures two documents that differ only in mapping key order compare equal.
"""

import json
import math
from collections.abc import Mapping
from typing import Any

from bson import json_util


def canonical_form(value: Any) -> Any:
    """
    Convert a structured value to a hashable, order-normalized form.
    
    Rules:
    - Mappings become key-sorted tuples (key order is irrelevant)
    - Sequences keep their order
    - Scalars are tagged with their kind so that True never equals 1
    - BSON scalars (ObjectId, datetime, ...) compare by their own equality
    
    Same logical value always produces an equal canonical form.
    """
    if isinstance(value, Mapping):
        items = [(str(key), canonical_form(item)) for key, item in value.items()]
        items.sort(key=lambda pair: pair[0])
        return ('map', tuple(items))
    
    if isinstance(value, (list, tuple)):
        return ('seq', tuple(canonical_form(item) for item in value))
    
    if value is None:
        return ('null', None)
    
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ('bool', value)
    
    # NaN never equals itself; give it a fixed form
    if isinstance(value, float) and math.isnan(value):
        return ('num', 'nan')
    
    if isinstance(value, (int, float)):
        return ('num', value)
    
    if isinstance(value, str):
        return ('str', value)
    
    return (type(value).__name__, value)


def structurally_equal(left: Any, right: Any) -> bool:
    """Deep equality, insensitive to mapping key order."""
    return canonical_form(left) == canonical_form(right)


def canonical_json_str(obj: Any) -> str:
    """
    Encode an object to canonical JSON string.
    
    Keys are sorted and BSON types are rendered as Extended JSON.
    Useful for debugging and logging.
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(',', ':'),
        ensure_ascii=False,
        default=json_util.default,
    )
