# File: tablegen/__init__.py
"""
TableGen - Typed Table Source Generator
========================================

Turns model declarations (YAML/JSON or in-memory objects) into four Java
source artifacts per model: a Table, a Row (cursor), a View and a Query
class, all bound to the same column layout.

Architecture overview::

    ┌──────────────┐     ┌────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│ TableGenerator │────▶│  SourceEmitter   │
    │   (cli.py)   │     │ (generator.py) │     │   (emitter.py)   │
    └──────────────┘     └───────┬────────┘     └────────┬─────────┘
                                 │                       │
              ┌──────────┬───────┼───────┬─────────┐     ├──────────┐
              ▼          ▼       ▼       ▼         ▼     ▼          ▼
         validators   naming   graph   schema  classifier renderer exporters

Usage::

    # As a library
    from tablegen import TableGenerator, parse_declarations
    batch, config = parse_declarations(raw)
    report = TableGenerator().generate(batch, config)

    # From the command line
    python -m tablegen --declarations models.yaml --output build/generated -v

Public API:
    - TableGenerator: Master orchestrator
    - DeclarationBatch: Input model declarations
    - GenerationConfig: Generation settings model
    - TableSchema: Resolved per-model schema
    - TemplateRenderer: Jinja2 template collaborator
    - FieldSorter: Field-order collaborator
    - validate_batch: Declaration validation entry point
"""

from __future__ import annotations

__version__: str = "1.0.0"
__license__: str = "MIT"

from tablegen.models import (
    ColumnInfo,
    ColumnKind,
    DeclarationBatch,
    FieldDeclaration,
    GenerationConfig,
    ModelDeclaration,
    ModelIdentity,
    NameOverrides,
    TableSchema,
)
from tablegen.errors import (
    ConfigurationError,
    GraphLookupError,
    NoColumnsError,
    TableGenError,
    UnclassifiedFieldError,
)
from tablegen.classifier import classify
from tablegen.naming import resolve_identity, resolve_identities
from tablegen.graph import ReferenceGraph, build_reference_graph
from tablegen.field_order import FieldSorter, NoopFieldSorter
from tablegen.schema import build_schema
from tablegen.renderer import TemplateRenderer
from tablegen.exporters import SourceExporter
from tablegen.emitter import SourceEmitter
from tablegen.validators import ValidationResult, validate_batch
from tablegen.generator import (
    GenerationReport,
    TableGenerator,
    load_declaration_file,
    parse_declarations,
)

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    "__version__",
    "__license__",
    # Core orchestrator
    "TableGenerator",
    "GenerationReport",
    "load_declaration_file",
    "parse_declarations",
    # Models
    "ColumnInfo",
    "ColumnKind",
    "DeclarationBatch",
    "FieldDeclaration",
    "GenerationConfig",
    "ModelDeclaration",
    "ModelIdentity",
    "NameOverrides",
    "TableSchema",
    # Errors
    "TableGenError",
    "UnclassifiedFieldError",
    "NoColumnsError",
    "ConfigurationError",
    "GraphLookupError",
    # Phases
    "classify",
    "resolve_identity",
    "resolve_identities",
    "ReferenceGraph",
    "build_reference_graph",
    "FieldSorter",
    "NoopFieldSorter",
    "build_schema",
    # Emission
    "TemplateRenderer",
    "SourceExporter",
    "SourceEmitter",
    # Validation
    "validate_batch",
    "ValidationResult",
]
