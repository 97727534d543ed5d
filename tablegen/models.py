# File: tablegen/models.py
"""
TableGen - Core Data Models
============================
Pydantic V2 models describing model declarations, the derived per-model
identity and schema, and the generation configuration.  These models are the
single source of truth for the whole pipeline:

    Declarations → Identities → Reference Graph → Schemas → Emission

Declarations are immutable once loaded; every derived structure is owned by
the generation run that produced it.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("tablegen.models")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

GENERATED_HEADER: str = "/* This file was automatically generated by TableGen. */"

DEFAULT_PACKAGE: str = "com.tightdb.generated"

DEFAULT_SOURCE_FOLDERS: List[str] = ["src", "src/main/java", "src/test/java"]

_SOURCE_FOLDER_SPLIT_RE: re.Pattern[str] = re.compile(r"[:,;]")


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ColumnKind(str, Enum):
    """Storage category a declared field maps to."""

    LONG = "Long"
    BOOLEAN = "Boolean"
    STRING = "String"
    DATE = "Date"
    BINARY = "Binary"
    TABLE = "Table"
    MIXED = "Mixed"


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_DECLARATION_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="forbid",
)

_SETTINGS_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    frozen=False,
    extra="forbid",
)


# ---------------------------------------------------------------------------
# Declarations (input)
# ---------------------------------------------------------------------------


class FieldDeclaration(BaseModel):
    """One declared member of a model."""

    model_config = _DECLARATION_CONFIG

    name: str = Field(..., min_length=1, description="Field name.")
    declared_type: str = Field(
        ...,
        min_length=1,
        alias="type",
        description="Declared type, e.g. 'int', 'java.lang.String' or a model id.",
    )
    position: int = Field(
        default=-1,
        description="Zero-based position within the enclosing model.",
    )

    @field_validator("declared_type")
    @classmethod
    def _strip_type(cls, v: str) -> str:
        return v.strip()

    def __repr__(self) -> str:
        return f"<Field {self.name}: {self.declared_type} @{self.position}>"


class NameOverrides(BaseModel):
    """Explicit names for the four generated artifacts."""

    model_config = _DECLARATION_CONFIG

    table: Optional[str] = Field(default=None, description="Table class name.")
    row: Optional[str] = Field(default=None, description="Row (cursor) class name.")
    view: Optional[str] = Field(default=None, description="View class name.")
    query: Optional[str] = Field(default=None, description="Query class name.")


class ModelDeclaration(BaseModel):
    """
    One user-declared entity.

    ``fields`` keeps the order in which the user wrote them; ``position`` is
    filled in from that order when the declaration does not carry one.
    Explicit positions win over list order (see ``ordered_fields``).
    """

    model_config = _DECLARATION_CONFIG

    name: str = Field(..., min_length=1, description="Simple model name.")
    package: Optional[str] = Field(
        default=None, description="Package / namespace of the model."
    )
    fields: List[FieldDeclaration] = Field(
        default_factory=list, description="Declared fields, in declaration order."
    )
    overrides: NameOverrides = Field(
        default_factory=NameOverrides,
        description="Optional {table, row, view, query} name overrides.",
    )

    @model_validator(mode="after")
    def _assign_positions(self) -> "ModelDeclaration":
        if any(f.position < 0 for f in self.fields):
            positioned: List[FieldDeclaration] = [
                f if f.position >= 0 else f.model_copy(update={"position": i})
                for i, f in enumerate(self.fields)
            ]
            object.__setattr__(self, "fields", positioned)
        return self

    def ordered_fields(self) -> List[FieldDeclaration]:
        """Fields sorted by ``position``; equal positions keep list order."""
        return sorted(self.fields, key=lambda f: f.position)

    @computed_field  # type: ignore[misc]
    @property
    def qualified_name(self) -> str:
        if self.package:
            return f"{self.package}.{self.name}"
        return self.name

    def __repr__(self) -> str:
        return f"<Model {self.qualified_name} ({len(self.fields)} fields)>"


class DeclarationBatch(BaseModel):
    """
    The set of model declarations processed together in one run.

    On construction, models without a package inherit the batch ``package``,
    and field types naming a batch model by its simple name are rewritten to
    that model's qualified name.
    """

    model_config = _DECLARATION_CONFIG

    package: Optional[str] = Field(
        default=None, description="Default package for models that name none."
    )
    models: List[ModelDeclaration] = Field(
        default_factory=list, description="All declared models."
    )

    @model_validator(mode="after")
    def _apply_batch_package(self) -> "DeclarationBatch":
        if self.package is None:
            return self
        models: List[ModelDeclaration] = [
            m if m.package is not None else m.model_copy(update={"package": self.package})
            for m in self.models
        ]
        object.__setattr__(self, "models", models)
        return self

    @model_validator(mode="after")
    def _qualify_model_references(self) -> "DeclarationBatch":
        simple_names: Dict[str, List[str]] = {}
        for m in self.models:
            simple_names.setdefault(m.name, []).append(m.qualified_name)

        qualified: List[ModelDeclaration] = []
        for model in self.models:
            fields: List[FieldDeclaration] = []
            for f in model.fields:
                targets: List[str] = simple_names.get(f.declared_type, [])
                if len(targets) == 1 and targets[0] != f.declared_type:
                    fields.append(f.model_copy(update={"declared_type": targets[0]}))
                else:
                    if len(targets) > 1:
                        logger.warning(
                            "Field '%s.%s' names ambiguous model '%s' (%s); "
                            "leaving the type unqualified.",
                            model.name,
                            f.name,
                            f.declared_type,
                            ", ".join(targets),
                        )
                    fields.append(f)
            qualified.append(model.model_copy(update={"fields": fields}))

        object.__setattr__(self, "models", qualified)
        return self

    def get_model(self, qualified_name: str) -> Optional[ModelDeclaration]:
        for model in self.models:
            if model.qualified_name == qualified_name:
                return model
        return None

    @computed_field  # type: ignore[misc]
    @property
    def model_names(self) -> List[str]:
        return [m.qualified_name for m in self.models]

    def __repr__(self) -> str:
        return f"<DeclarationBatch {len(self.models)} models>"


# ---------------------------------------------------------------------------
# Derived structures (output of the resolution phases)
# ---------------------------------------------------------------------------


class ModelIdentity(BaseModel):
    """Canonical names of the four artifacts generated for one model."""

    model_config = _DECLARATION_CONFIG

    table_name: str
    row_name: str
    view_name: str
    query_name: str
    is_nested: bool = False

    def names(self) -> Dict[str, str]:
        """Artifact kind → canonical name, in emission order."""
        return {
            "table": self.table_name,
            "row": self.row_name,
            "view": self.view_name,
            "query": self.query_name,
        }


class ColumnInfo(BaseModel):
    """One resolved, typed, indexed field of a model's schema."""

    model_config = _DECLARATION_CONFIG

    name: str
    kind: ColumnKind
    original_type: str
    adjusted_type: str
    param_type: str
    index: int = Field(..., ge=0)
    nested: Optional[ModelIdentity] = Field(
        default=None,
        description="Identity of the nested model (only for Table columns).",
    )

    @model_validator(mode="after")
    def _nested_only_for_tables(self) -> "ColumnInfo":
        if (self.kind == ColumnKind.TABLE) != (self.nested is not None):
            raise ValueError(
                f"Column '{self.name}': nesting info must be present exactly "
                f"when the kind is Table (kind={self.kind.value})."
            )
        return self

    @computed_field  # type: ignore[misc]
    @property
    def is_subtable(self) -> bool:
        return self.kind == ColumnKind.TABLE

    def to_attributes(self) -> Dict[str, Any]:
        """Flatten into the mapping consumed by the templates."""
        attrs: Dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "original_type": self.original_type,
            "field_type": self.adjusted_type,
            "param_type": self.param_type,
            "index": self.index,
            "is_subtable": self.is_subtable,
        }
        if self.nested is not None:
            attrs["sub_table_name"] = self.nested.table_name
            attrs["sub_row_name"] = self.nested.row_name
            attrs["sub_view_name"] = self.nested.view_name
            attrs["sub_query_name"] = self.nested.query_name
        return attrs

    def __repr__(self) -> str:
        return f"<Column {self.index}:{self.name} {self.kind.value}>"


class TableSchema(BaseModel):
    """Fully resolved description of one model."""

    model_config = _DECLARATION_CONFIG

    qualified_name: str
    package_name: str
    identity: ModelIdentity
    columns: List[ColumnInfo] = Field(default_factory=list)

    @field_validator("columns")
    @classmethod
    def _dense_indices(cls, v: List[ColumnInfo]) -> List[ColumnInfo]:
        indices: List[int] = [c.index for c in v]
        if indices != list(range(len(v))):
            raise ValueError(f"Column indices must be 0..n-1 in order, got {indices}")
        return v

    @computed_field  # type: ignore[misc]
    @property
    def is_nested(self) -> bool:
        return self.identity.is_nested

    @computed_field  # type: ignore[misc]
    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def __repr__(self) -> str:
        return (
            f"<TableSchema {self.qualified_name} "
            f"({len(self.columns)} cols, nested={self.is_nested})>"
        )


# ---------------------------------------------------------------------------
# Generation Configuration
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """
    Settings that control one generation run.

    Combined with a ``DeclarationBatch`` this is everything the generator
    needs.  ``source_folders`` accepts either a list or a single string split
    on ``:``, ``,`` or ``;``.
    """

    model_config = _SETTINGS_CONFIG

    output_dir: Optional[str] = Field(
        default=None, description="Root directory for generated sources."
    )
    source_folders: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SOURCE_FOLDERS),
        description="Folders searched for model sources when correcting field order.",
    )
    default_package: str = Field(
        default=DEFAULT_PACKAGE,
        description="Package used when neither the model nor the batch names one.",
    )
    header: str = Field(
        default=GENERATED_HEADER,
        min_length=1,
        description="Banner written at the top of every generated file.",
    )
    file_extension: str = Field(
        default=".java", description="Suffix of generated source files."
    )
    sort_fields: bool = Field(
        default=True, description="Consult the field-order collaborator."
    )
    atomic_writes: bool = Field(
        default=True, description="Write to a temp file, then rename."
    )
    dry_run: bool = Field(
        default=False, description="Run the pipeline without writing files."
    )

    @field_validator("source_folders", mode="before")
    @classmethod
    def _split_source_folders(cls, v: Union[str, List[str], None]) -> List[str]:
        if v is None:
            return list(DEFAULT_SOURCE_FOLDERS)
        if isinstance(v, str):
            return [p.strip() for p in _SOURCE_FOLDER_SPLIT_RE.split(v) if p.strip()]
        return v

    @field_validator("file_extension")
    @classmethod
    def _dotted_extension(cls, v: str) -> str:
        if v and not v.startswith("."):
            return f".{v}"
        return v


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "GENERATED_HEADER",
    "DEFAULT_PACKAGE",
    "DEFAULT_SOURCE_FOLDERS",
    "ColumnKind",
    "FieldDeclaration",
    "NameOverrides",
    "ModelDeclaration",
    "DeclarationBatch",
    "ModelIdentity",
    "ColumnInfo",
    "TableSchema",
    "GenerationConfig",
]

logger.debug("tablegen.models loaded (%d public symbols).", len(__all__))
