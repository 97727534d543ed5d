# File: tablegen/schema.py
"""
TableGen - Schema Builder
==========================

Turns one model declaration into a ``TableSchema``:

    1. fields in stable declaration order (field-order collaborator wins);
    2. classify each field, dropping the unsupported ones;
    3. give each kept field the next dense index;
    4. attach the nested model's identity to Table columns.

Identities for the whole batch must already be resolved; a Table column
whose nested identity is missing raises ``GraphLookupError``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from tablegen.classifier import adjusted_type, classify, param_type
from tablegen.errors import GraphLookupError, NoColumnsError, TableGenError, UnclassifiedFieldError
from tablegen.field_order import FieldSorter
from tablegen.graph import ReferenceGraph
from tablegen.models import (
    ColumnInfo,
    ColumnKind,
    FieldDeclaration,
    ModelDeclaration,
    ModelIdentity,
    TableSchema,
)

logger: logging.Logger = logging.getLogger("tablegen.schema")


def build_columns(
    model: ModelDeclaration,
    fields: Sequence[FieldDeclaration],
    graph: ReferenceGraph,
    identities: Dict[str, ModelIdentity],
    errors: Optional[List[TableGenError]] = None,
) -> List[ColumnInfo]:
    """Classify *fields* in order and return the resulting columns."""
    columns: List[ColumnInfo] = []
    for fld in fields:
        kind: Optional[ColumnKind] = classify(fld.declared_type, graph.nested)
        if kind is None:
            error = UnclassifiedFieldError(model.qualified_name, fld.name, fld.declared_type)
            logger.error("%s", error)
            if errors is not None:
                errors.append(error)
            continue

        nested: Optional[ModelIdentity] = None
        if kind == ColumnKind.TABLE:
            nested = identities.get(fld.declared_type)
            if nested is None:
                raise GraphLookupError(model.qualified_name, fld.name, fld.declared_type)

        columns.append(
            ColumnInfo(
                name=fld.name,
                kind=kind,
                original_type=fld.declared_type,
                adjusted_type=adjusted_type(fld.declared_type),
                param_type=param_type(fld.declared_type),
                index=len(columns),
                nested=nested,
            )
        )
    return columns


def build_schema(
    model: ModelDeclaration,
    identity: ModelIdentity,
    graph: ReferenceGraph,
    identities: Dict[str, ModelIdentity],
    *,
    package_name: Optional[str] = None,
    field_sorter: Optional[FieldSorter] = None,
    search_paths: Optional[Sequence[Path]] = None,
    errors: Optional[List[TableGenError]] = None,
) -> TableSchema:
    """
    Build the schema of *model*.

    Unsupported fields are appended to *errors* as ``UnclassifiedFieldError``.
    Raises ``NoColumnsError`` (carrying the empty schema) when nothing is left.
    """
    fields: List[FieldDeclaration] = model.ordered_fields()
    if field_sorter is not None:
        fields = field_sorter.stable_order(fields, model, search_paths)

    logger.info(
        "Generating code for entity '%s' with %d field(s)...",
        model.name,
        len(fields),
    )

    columns: List[ColumnInfo] = build_columns(model, fields, graph, identities, errors)

    schema = TableSchema(
        qualified_name=model.qualified_name,
        package_name=package_name if package_name is not None else (model.package or ""),
        identity=identity,
        columns=columns,
    )

    if not columns:
        raise NoColumnsError(model.qualified_name, schema)

    return schema


__all__: List[str] = [
    "build_columns",
    "build_schema",
]
