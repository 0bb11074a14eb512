"""
Document set files.

A document set file holds one collection as a JSON array, indented
with two spaces. BSON values are written as relaxed Extended JSON so
that ObjectIds and dates read back as the same types.
"""

from pathlib import Path
from typing import List
import os
import tempfile

from bson import json_util
from bson.errors import BSONError
from bson.json_util import RELAXED_JSON_OPTIONS

from ..errors import DeserializationError


def encode_document_set(documents: List[dict]) -> str:
    """
    Encode documents to the on-disk text form.
    
    Field order is kept as given, so unchanged documents always
    encode to identical text.
    """
    text = json_util.dumps(
        list(documents),
        indent=2,
        ensure_ascii=False,
        json_options=RELAXED_JSON_OPTIONS,
    )
    return text + '\n'


def write_document_set(path: Path, documents: List[dict]) -> None:
    """
    Write a document set file atomically.
    
    Uses temp file + rename so a reader never sees a partial file.
    OSError propagates unmodified.
    """
    path = Path(path)
    data = encode_document_set(documents).encode('utf-8')
    
    fd, temp_path = tempfile.mkstemp(
        dir=str(path.parent),
        prefix='.tmp_',
        suffix='.tmp'
    )
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.replace(temp_path, path)
    except BaseException:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def read_document_set(path: Path) -> List[dict]:
    """
    Read a document set file.
    
    Raises DeserializationError if the file is not a JSON array of objects.
    OSError propagates unmodified.
    """
    path = Path(path)
    text = path.read_text(encoding='utf-8')
    
    try:
        documents = json_util.loads(text, json_options=RELAXED_JSON_OPTIONS)
    except (ValueError, BSONError) as e:
        raise DeserializationError(str(path), "malformed JSON", e)
    
    if not isinstance(documents, list):
        raise DeserializationError(
            str(path),
            f"expected an array of documents, got {type(documents).__name__}"
        )
    
    for position, document in enumerate(documents):
        if not isinstance(document, dict):
            raise DeserializationError(
                str(path),
                f"entry {position} is {type(document).__name__}, not an object"
            )
    
    return documents
