# File: tablegen/errors.py
"""
TableGen - Error Taxonomy
==========================

Two classes of failure exist:

Non-fatal (accumulated in the ``GenerationReport``, processing continues):
    - ``UnclassifiedFieldError``: a field's declared type matches no column
      kind; the field is dropped.
    - ``NoColumnsError``: a model ended up with zero columns; its artifacts
      are still emitted.

Fatal (the run stops immediately):
    - ``ConfigurationError``: the output location cannot be determined.
    - ``GraphLookupError``: a Table column references a model whose identity
      was never resolved.  This is a phase-ordering bug, hence an
      ``AssertionError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from tablegen.models import TableSchema


class TableGenError(Exception):
    """Base class for every error raised by tablegen."""

    code: str = "TABLEGEN_ERROR"
    fatal: bool = True


class UnclassifiedFieldError(TableGenError):
    """A declared field type matches none of the column kinds."""

    code = "UNCLASSIFIED_FIELD"
    fatal = False

    def __init__(self, model_name: str, field_name: str, declared_type: str) -> None:
        self.model_name: str = model_name
        self.field_name: str = field_name
        self.declared_type: str = declared_type
        super().__init__(
            f"Field '{model_name}.{field_name}' has unsupported type "
            f"'{declared_type}'. Expected a primitive or wrapper type, byte[], "
            f"java.lang.Object, java.util.Date, java.nio.ByteBuffer or a nested "
            f"model of the same batch; the field was skipped."
        )


class NoColumnsError(TableGenError):
    """A model has no classifiable field left."""

    code = "NO_COLUMNS"
    fatal = False

    def __init__(self, model_name: str, schema: Optional["TableSchema"] = None) -> None:
        self.model_name: str = model_name
        self.schema: Optional["TableSchema"] = schema
        super().__init__(
            f"Model '{model_name}' must have at least one valid field/column; "
            f"its artifacts are generated with an empty column set."
        )


class ConfigurationError(TableGenError):
    """Fatal: the run cannot know where generated sources belong."""

    code = "CONFIGURATION"


class GraphLookupError(TableGenError, AssertionError):
    """Fatal: a nested model's identity was requested before it was resolved."""

    code = "GRAPH_LOOKUP"

    def __init__(self, model_name: str, field_name: str, referenced: str) -> None:
        self.model_name: str = model_name
        self.field_name: str = field_name
        self.referenced: str = referenced
        super().__init__(
            f"Column '{model_name}.{field_name}' references nested model "
            f"'{referenced}' whose identity was never resolved."
        )


__all__: List[str] = [
    "TableGenError",
    "UnclassifiedFieldError",
    "NoColumnsError",
    "ConfigurationError",
    "GraphLookupError",
]
