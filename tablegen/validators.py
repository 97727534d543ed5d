# File: tablegen/validators.py
"""
TableGen - Declaration Validators
==================================
Pure-function validation of a ``DeclarationBatch`` before generation starts.

Pydantic already guarantees the structural shape of every declaration.  The
checks here are semantic and cross-model: duplicate names, Java identifier
rules, field positions, override spelling and references to models outside
the batch.

Usage::

    from tablegen.validators import validate_batch
    result = validate_batch(batch)
    if not result:
        print(result.format_report())
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Set

from tablegen.classifier import SUPPORTED_TYPES
from tablegen.models import DeclarationBatch
from tablegen.utils import is_java_identifier, is_qualified_name, simple_type_name

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("tablegen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationIssue:
    """Lightweight issue descriptor (no Pydantic overhead)."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning" | "info"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()


class ValidationResult:
    """Accumulates ``ValidationIssue`` instances produced by the validators."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationIssue] = []

    # -- Mutation -----------------------------------------------------------

    def add_error(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationIssue("error", code, message, context))

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationIssue("warning", code, message, context))

    def add_info(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationIssue("info", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def errors(self) -> List[ValidationIssue]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [e for e in self._items if e.is_warning]

    @property
    def infos(self) -> List[ValidationIssue]:
        return [e for e in self._items if e.level == "info"]

    @property
    def has_errors(self) -> bool:
        return any(e.is_error for e in self._items)

    @property
    def error_count(self) -> int:
        return sum(1 for e in self._items if e.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for e in self._items if e.is_warning)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def summary(self) -> str:
        return (
            f"Validation: {self.error_count} error(s), "
            f"{self.warning_count} warning(s), "
            f"{len(self._items)} total item(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self, include_info: bool = False) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary(), ""]
        for item in self._items:
            if not include_info and item.level == "info":
                continue
            prefix: str = {
                "error": "✗",
                "warning": "⚠",
                "info": "ℹ",
            }.get(item.level, "•")
            lines.append(f"  {prefix} [{item.code}] {item.message}")
            for k, v in item.context.items():
                lines.append(f"       {k}: {v}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Individual validators
# ---------------------------------------------------------------------------


def validate_model_names(batch: DeclarationBatch) -> ValidationResult:
    """Model names must be Java identifiers; qualified names must be unique."""
    result: ValidationResult = ValidationResult()
    seen: Set[str] = set()

    for model in batch.models:
        ctx: Dict[str, Any] = {"model": model.qualified_name}

        if model.qualified_name in seen:
            result.add_error(
                "DUPLICATE_MODEL_NAME",
                f"Model '{model.qualified_name}' is declared more than once.",
                ctx,
            )
        seen.add(model.qualified_name)

        if not is_java_identifier(model.name):
            result.add_error(
                "INVALID_MODEL_NAME",
                f"Model name '{model.name}' is not a valid Java identifier.",
                ctx,
            )

        if model.package and not is_qualified_name(model.package):
            result.add_error(
                "INVALID_PACKAGE_NAME",
                f"Package '{model.package}' of model '{model.name}' is not a "
                f"dotted sequence of Java identifiers.",
                ctx,
            )

        if not model.fields:
            result.add_warning(
                "MODEL_WITHOUT_FIELDS",
                f"Model '{model.qualified_name}' declares no fields; "
                f"its artifacts will have no columns.",
                ctx,
            )

    return result


def validate_field_names(batch: DeclarationBatch) -> ValidationResult:
    """Field names must be Java identifiers and unique within their model."""
    result: ValidationResult = ValidationResult()

    for model in batch.models:
        seen: Set[str] = set()
        for fld in model.fields:
            ctx: Dict[str, Any] = {"model": model.qualified_name, "field": fld.name}
            if fld.name in seen:
                result.add_error(
                    "DUPLICATE_FIELD_NAME",
                    f"Field '{fld.name}' is declared more than once in "
                    f"'{model.qualified_name}'.",
                    ctx,
                )
            seen.add(fld.name)

            if not is_java_identifier(fld.name):
                result.add_error(
                    "INVALID_FIELD_NAME",
                    f"Field name '{model.name}.{fld.name}' is not a valid Java identifier.",
                    ctx,
                )

    return result


def validate_field_positions(batch: DeclarationBatch) -> ValidationResult:
    """Field positions must be unique and lie in ``0..n-1`` within their model."""
    result: ValidationResult = ValidationResult()

    for model in batch.models:
        size: int = len(model.fields)
        taken: Dict[int, str] = {}
        for fld in model.fields:
            ctx: Dict[str, Any] = {"model": model.qualified_name, "field": fld.name}
            if not 0 <= fld.position < size:
                result.add_error(
                    "FIELD_POSITION_OUT_OF_RANGE",
                    f"Field '{model.name}.{fld.name}' has position {fld.position}; "
                    f"expected 0..{size - 1}.",
                    ctx,
                )
            elif fld.position in taken:
                result.add_error(
                    "DUPLICATE_FIELD_POSITION",
                    f"Fields '{taken[fld.position]}' and '{fld.name}' of "
                    f"'{model.qualified_name}' share position {fld.position}.",
                    ctx,
                )
            else:
                taken[fld.position] = fld.name

    return result


def validate_overrides(batch: DeclarationBatch) -> ValidationResult:
    """Override names are used verbatim, so odd spellings only warn."""
    result: ValidationResult = ValidationResult()

    for model in batch.models:
        for kind, value in model.overrides.model_dump().items():
            if value is None or is_java_identifier(value):
                continue
            result.add_warning(
                "OVERRIDE_NOT_IDENTIFIER",
                f"Override {kind}='{value}' of '{model.qualified_name}' is not a "
                f"valid Java identifier; it will be used as given.",
                {"model": model.qualified_name, "artifact": kind},
            )

    return result


def _looks_like_model(declared_type: str) -> bool:
    simple: str = simple_type_name(declared_type)
    return bool(simple) and simple[0].isupper() and is_java_identifier(simple)


def validate_references(batch: DeclarationBatch) -> ValidationResult:
    """Flag field types that look like model names but are not in the batch."""
    result: ValidationResult = ValidationResult()
    known: Set[str] = set(batch.model_names)

    for model in batch.models:
        for fld in model.fields:
            t: str = fld.declared_type
            if t in SUPPORTED_TYPES or t in known or not _looks_like_model(t):
                continue
            result.add_info(
                "UNKNOWN_MODEL_REFERENCE",
                f"Field '{model.name}.{fld.name}' has type '{t}', which is not a "
                f"model of this batch; the field will be skipped.",
                {"model": model.qualified_name, "field": fld.name},
            )

    return result


# ---------------------------------------------------------------------------
# Composite entry point
# ---------------------------------------------------------------------------


def validate_batch(batch: DeclarationBatch) -> ValidationResult:
    """Run every validator over *batch* and merge the results."""
    logger.info("Starting validation of %d model(s).", len(batch.models))

    result: ValidationResult = ValidationResult()
    validators: List[Callable[[DeclarationBatch], ValidationResult]] = [
        validate_model_names,
        validate_field_names,
        validate_field_positions,
        validate_overrides,
        validate_references,
    ]
    for validator_fn in validators:
        logger.debug("Running validator: %s", validator_fn.__name__)
        result.merge(validator_fn(batch))

    if result.has_errors:
        logger.error("Validation FAILED with %d error(s). %s", result.error_count, result.summary())
    else:
        logger.info("Validation PASSED. %s", result.summary())
    return result


__all__: List[str] = [
    "ValidationIssue",
    "ValidationResult",
    "validate_model_names",
    "validate_field_names",
    "validate_field_positions",
    "validate_overrides",
    "validate_references",
    "validate_batch",
]

logger.debug("tablegen.validators loaded (%d public symbols).", len(__all__))
