# File: tablegen/classifier.py
"""
TableGen - Type Classifier
===========================

Maps a field's declared type to a ``ColumnKind`` and derives the two type
spellings the templates need:

* the *adjusted* type, used for the storage-facing representation;
* the *parameter* type, used in generated method signatures.

The two differ for ``byte[]`` only: storage uses ``java.nio.ByteBuffer``
while method signatures keep accepting ``byte[]``.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Dict, FrozenSet, List, Optional

from tablegen.models import ColumnKind

logger: logging.Logger = logging.getLogger("tablegen.classifier")

# ---------------------------------------------------------------------------
# Declared-type vocabulary
# ---------------------------------------------------------------------------

INTEGER_TYPES: FrozenSet[str] = frozenset({
    "long", "int", "short", "byte",
    "java.lang.Long", "java.lang.Integer", "java.lang.Short", "java.lang.Byte",
})

BOOLEAN_TYPES: FrozenSet[str] = frozenset({"boolean", "java.lang.Boolean"})

STRING_TYPE: str = "java.lang.String"
DATE_TYPE: str = "java.util.Date"
BYTE_ARRAY_TYPE: str = "byte[]"
BYTE_BUFFER_TYPE: str = "java.nio.ByteBuffer"
OBJECT_TYPE: str = "java.lang.Object"

CANONICAL_INTEGER_TYPE: str = "long"
MIXED_TYPE: str = "com.tightdb.Mixed"

BINARY_TYPES: FrozenSet[str] = frozenset({BYTE_ARRAY_TYPE, BYTE_BUFFER_TYPE})

# Every non-model type the classifier accepts, with its kind.
SUPPORTED_TYPES: Dict[str, ColumnKind] = {
    **{t: ColumnKind.LONG for t in INTEGER_TYPES},
    **{t: ColumnKind.BOOLEAN for t in BOOLEAN_TYPES},
    STRING_TYPE: ColumnKind.STRING,
    DATE_TYPE: ColumnKind.DATE,
    **{t: ColumnKind.BINARY for t in BINARY_TYPES},
    OBJECT_TYPE: ColumnKind.MIXED,
}


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def classify(
    declared_type: str,
    nested: AbstractSet[str] = frozenset(),
) -> Optional[ColumnKind]:
    """
    Return the column kind for *declared_type*, or ``None`` if unsupported.

    Rules are tried in priority order and the first match wins; *nested* is
    the set of qualified names of the batch's subtable models.
    """
    if declared_type in INTEGER_TYPES:
        return ColumnKind.LONG
    if declared_type in BOOLEAN_TYPES:
        return ColumnKind.BOOLEAN
    if declared_type == STRING_TYPE:
        return ColumnKind.STRING
    if declared_type == DATE_TYPE:
        return ColumnKind.DATE
    if declared_type in BINARY_TYPES:
        return ColumnKind.BINARY
    if declared_type in nested:
        return ColumnKind.TABLE
    if declared_type == OBJECT_TYPE:
        return ColumnKind.MIXED
    return None


def adjusted_type(declared_type: str) -> str:
    """Storage-facing spelling of a classified field's type."""
    if declared_type in INTEGER_TYPES:
        return CANONICAL_INTEGER_TYPE
    if declared_type == BYTE_ARRAY_TYPE:
        return BYTE_BUFFER_TYPE
    if declared_type == OBJECT_TYPE:
        return MIXED_TYPE
    return declared_type


def param_type(declared_type: str) -> str:
    """Method-signature spelling of a classified field's type (``byte[]`` kept)."""
    if declared_type in INTEGER_TYPES:
        return CANONICAL_INTEGER_TYPE
    if declared_type == OBJECT_TYPE:
        return MIXED_TYPE
    return declared_type


__all__: List[str] = [
    "INTEGER_TYPES",
    "BOOLEAN_TYPES",
    "BINARY_TYPES",
    "SUPPORTED_TYPES",
    "CANONICAL_INTEGER_TYPE",
    "MIXED_TYPE",
    "classify",
    "adjusted_type",
    "param_type",
]
