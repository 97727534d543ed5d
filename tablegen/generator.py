# File: tablegen/generator.py
"""
TableGen - Master Generation Pipeline (Orchestrator)
=====================================================

Connects every phase of a run:

    Declarations → Validation → Identities → Reference Graph → Schemas → Emission

Workflow::

    1. Load declarations from a YAML/JSON file (or accept in-memory objects).
    2. Parse into ``DeclarationBatch`` + ``GenerationConfig`` (models.py).
    3. Validate the batch (validators.py).
    4. Prepare the output location (exporters.py).
    5. Resolve the identity of every model (naming.py).
    6. Build the reference graph and mark nested models (graph.py).
    7. Build one ``TableSchema`` per model (schema.py).
    8. Render and write the four artifacts of each schema (emitter.py).
    9. Return a ``GenerationReport`` with metrics and status.

Phase 5 completes for the whole batch before any schema is built, because a
referencing model needs the identity of the models it nests.

Error handling strategy:
    - Input and validation problems are collected and surfaced, not swallowed.
    - Per-field and per-model errors are accumulated; sibling models are
      still processed and emitted.
    - Fatal errors (``ConfigurationError``, ``GraphLookupError``) stop the run
      at once and are recorded as ``report.fatal_error``.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from tablegen.emitter import EmittedSource, SourceEmitter
from tablegen.errors import NoColumnsError, TableGenError
from tablegen.exporters import ExportManifest, FileRecord, SourceExporter
from tablegen.field_order import FieldSorter, NoopFieldSorter, resolve_search_paths
from tablegen.graph import ReferenceGraph, build_reference_graph
from tablegen.models import (
    DeclarationBatch,
    GenerationConfig,
    ModelDeclaration,
    ModelIdentity,
    TableSchema,
)
from tablegen.naming import resolve_identities
from tablegen.renderer import TemplateRenderer
from tablegen.schema import build_schema
from tablegen.utils import Timer
from tablegen.validators import ValidationResult, validate_batch

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("tablegen.generator")

_MODEL_LIST_KEYS: Tuple[str, ...] = ("models", "tables")
_CONFIG_KEYS: Tuple[str, ...] = ("config", "generation_config")


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """
    Report produced by ``TableGenerator.generate()``.

    Contains timing information, the emitted files, validation issues and
    every error encountered.
    """

    success: bool = False
    output_directory: str = ""
    dry_run: bool = False

    models_processed: int = 0
    top_level_tables: List[str] = field(default_factory=list)
    subtables: List[str] = field(default_factory=list)
    total_elapsed_seconds: float = 0.0

    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    input_errors: List[str] = field(default_factory=list)
    validation_errors: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    generation_errors: List[TableGenError] = field(default_factory=list)
    fatal_error: Optional[TableGenError] = None

    schemas: List[TableSchema] = field(default_factory=list)
    manifest: Optional[ExportManifest] = None

    @property
    def artifacts(self) -> List[FileRecord]:
        return list(self.manifest.files) if self.manifest is not None else []

    @property
    def total_files(self) -> int:
        return self.manifest.total_files if self.manifest is not None else 0

    @property
    def total_bytes(self) -> int:
        return self.manifest.total_bytes if self.manifest is not None else 0

    @property
    def total_lines(self) -> int:
        return self.manifest.total_lines if self.manifest is not None else 0

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "SUCCESS" if self.success else "FAILED"
        if self.dry_run:
            status += " (dry run)"
        lines.append(f"{'='*60}")
        lines.append("  TableGen - Generation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:           {status}")
        lines.append(f"  Output:           {self.output_directory}")
        lines.append(f"  Models processed: {self.models_processed}")
        lines.append(f"  Top-level tables: {len(self.top_level_tables)}")
        lines.append(f"  Subtables:        {len(self.subtables)}")
        lines.append(f"  Files generated:  {self.total_files}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total bytes:      {self.total_bytes:,}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")
        lines.append(f"{'─'*60}")

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                mark: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {mark} {step.step_name:<28s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        if self.fatal_error is not None:
            lines.append(f"{'─'*60}")
            lines.append(f"  Fatal Error: {self.fatal_error}")

        sections: List[Tuple[str, str, List[str]]] = [
            ("Input Errors", "✗", self.input_errors),
            ("Validation Errors", "✗", self.validation_errors),
            ("Validation Warnings", "⚠", self.validation_warnings),
            ("Generation Errors", "✗", [str(e) for e in self.generation_errors]),
        ]
        for title, icon, items in sections:
            if not items:
                continue
            lines.append(f"{'─'*60}")
            lines.append(f"  {title} ({len(items)}):")
            for item in items:
                lines.append(f"    {icon} {item}")

        if self.artifacts:
            lines.append(f"{'─'*60}")
            verb: str = "Would write" if self.dry_run else "Written"
            lines.append(f"  {verb} ({len(self.artifacts)}):")
            for record in self.artifacts:
                lines.append(f"    • {record.relative_path}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Declaration loader helpers
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_declaration_file(path: Path) -> Dict[str, Any]:
    """
    Load a declaration file (JSON or YAML), dispatching on the extension.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Declaration file not found: {path}")

    if not path.is_file():
        raise ValueError(f"Declaration path is not a file: {path}")

    suffix: str = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    if suffix == ".json":
        return _load_json_file(path)

    logger.info("Unknown extension '%s'; trying JSON then YAML.", suffix)
    try:
        return _load_json_file(path)
    except ValueError:
        return _load_yaml_file(path)


def _config_key(raw: Dict[str, Any]) -> Optional[str]:
    for key in _CONFIG_KEYS:
        if key in raw:
            return key
    return None


def parse_declarations(raw: Dict[str, Any]) -> Tuple[DeclarationBatch, GenerationConfig]:
    """
    Parse a raw dictionary (from JSON/YAML) into validated Pydantic models.

    Expected top-level keys:
        - "models" (or "tables"): list of model declarations
        - "package": optional default package of the batch
        - "config" (or "generation_config"): optional generation settings

    Raises:
        ValueError: If required keys are missing or validation fails.
    """
    models_data: Optional[Any] = None
    for key in _MODEL_LIST_KEYS:
        if key in raw:
            models_data = raw[key]
            break

    if models_data is None:
        raise ValueError(
            "Cannot find model declarations in input. "
            "Expected top-level key: 'models' or 'tables'."
        )
    if not isinstance(models_data, list):
        raise ValueError(
            f"Model declarations must be a list, got {type(models_data).__name__}."
        )

    config_key: Optional[str] = _config_key(raw)
    config_data: Any = raw.get(config_key) if config_key is not None else None
    if config_data is None:
        logger.info("No generation config found in input; using defaults.")
        config_data = {}

    try:
        batch: DeclarationBatch = DeclarationBatch.model_validate(
            {"package": raw.get("package"), "models": models_data}
        )
    except ValidationError as exc:
        raise ValueError(f"Declaration validation failed: {exc}") from exc

    try:
        config: GenerationConfig = GenerationConfig.model_validate(config_data)
    except ValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc

    return batch, config


# ---------------------------------------------------------------------------
# TableGenerator: master orchestrator
# ---------------------------------------------------------------------------


class TableGenerator:
    """
    Master pipeline orchestrator.

    Usage::

        generator = TableGenerator()

        # From a file
        report = generator.generate_from_file(
            Path("models.yaml"),
            config_overrides={"output_dir": "build/generated"},
        )

        # From in-memory objects
        report = generator.generate(batch, config)

        print(report.summary())

    The generator is reusable: every call starts from fresh run state.
    """

    def __init__(
        self,
        *,
        strict_validation: bool = True,
        renderer: Optional[TemplateRenderer] = None,
        field_sorter: Optional[FieldSorter] = None,
    ) -> None:
        """
        Initialise the generator.

        Args:
            strict_validation: If True, abort on any validation error.
            renderer: Template collaborator (Jinja2 templates by default).
            field_sorter: Field-order collaborator; by default chosen from
                ``config.sort_fields`` on each run.
        """
        self._strict_validation: bool = strict_validation
        self._renderer: TemplateRenderer = renderer or TemplateRenderer()
        self._field_sorter: Optional[FieldSorter] = field_sorter

        logger.debug(
            "TableGenerator initialised: strict=%s, templates=%s.",
            strict_validation,
            self._renderer.templates_dir,
        )

    # -----------------------------------------------------------------
    # Public: generate from file
    # -----------------------------------------------------------------

    def generate_from_file(
        self,
        declaration_path: Path,
        *,
        config_overrides: Optional[Dict[str, Any]] = None,
    ) -> GenerationReport:
        """
        Full pipeline: load file → validate → generate → write.

        ``config_overrides`` take precedence over the file's ``config`` section.
        """
        report: GenerationReport = GenerationReport()

        with Timer("load_declarations") as t_load:
            try:
                raw_data: Dict[str, Any] = load_declaration_file(declaration_path)
                logger.info(
                    "Loaded declaration file: %s (%d top-level keys).",
                    declaration_path,
                    len(raw_data),
                )
            except (FileNotFoundError, ValueError) as exc:
                report.input_errors.append(str(exc))
                report.step_metrics.append(GenerationStepMetric(
                    step_name="Load Declarations",
                    success=False,
                    elapsed_seconds=t_load.elapsed,
                    detail=str(exc),
                ))
                return self._finalise_report(report, t_load.elapsed)

        report.step_metrics.append(GenerationStepMetric(
            step_name="Load Declarations",
            success=True,
            elapsed_seconds=t_load.elapsed,
            detail=f"from {declaration_path.name}",
        ))

        with Timer("parse_declarations") as t_parse:
            try:
                if config_overrides:
                    key: str = _config_key(raw_data) or "config"
                    merged: Dict[str, Any] = dict(raw_data.get(key) or {})
                    merged.update(config_overrides)
                    raw_data[key] = merged

                batch, config = parse_declarations(raw_data)
                logger.info("Parsed %d model declaration(s).", len(batch.models))
            except ValueError as exc:
                report.input_errors.append(str(exc))
                report.step_metrics.append(GenerationStepMetric(
                    step_name="Parse Declarations",
                    success=False,
                    elapsed_seconds=t_parse.elapsed,
                    detail=str(exc),
                ))
                return self._finalise_report(report, t_load.elapsed + t_parse.elapsed)

        report.step_metrics.append(GenerationStepMetric(
            step_name="Parse Declarations",
            success=True,
            elapsed_seconds=t_parse.elapsed,
            detail=f"{len(batch.models)} models parsed",
        ))

        return self._run_pipeline(batch, config, report)

    # -----------------------------------------------------------------
    # Public: generate from in-memory objects
    # -----------------------------------------------------------------

    def generate(self, batch: DeclarationBatch, config: GenerationConfig) -> GenerationReport:
        """Full pipeline from a pre-parsed batch and configuration."""
        return self._run_pipeline(batch, config, GenerationReport())

    # -----------------------------------------------------------------
    # Internal: master pipeline
    # -----------------------------------------------------------------

    def _run_pipeline(
        self,
        batch: DeclarationBatch,
        config: GenerationConfig,
        report: GenerationReport,
    ) -> GenerationReport:
        pipeline_start: float = time.perf_counter()
        report.dry_run = config.dry_run

        if not self._step_validate(batch, report) and self._strict_validation:
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        try:
            exporter: SourceExporter = self._step_prepare_output(config, report)

            with Timer("resolve_identities") as t:
                identities: Dict[str, ModelIdentity] = resolve_identities(batch.models)
                graph: ReferenceGraph = build_reference_graph(batch.models)
                identities = graph.annotate(identities)
            report.top_level_tables = graph.top_level
            report.subtables = graph.subtables
            report.step_metrics.append(GenerationStepMetric(
                step_name="Resolve Identities",
                elapsed_seconds=t.elapsed,
                detail=(
                    f"{len(graph.top_level)} top-level, "
                    f"{len(graph.subtables)} nested"
                ),
            ))

            schemas: List[TableSchema] = self._step_build_schemas(
                batch, config, graph, identities, exporter.output_dir, report
            )
            self._step_emit(schemas, config, exporter, report)

        except TableGenError as exc:
            if not exc.fatal:
                raise
            report.fatal_error = exc
            logger.critical("Generation aborted: %s", exc)

        return self._finalise_report(report, time.perf_counter() - pipeline_start)

    # -----------------------------------------------------------------
    # Pipeline steps
    # -----------------------------------------------------------------

    def _step_validate(self, batch: DeclarationBatch, report: GenerationReport) -> bool:
        with Timer("validation") as t:
            result: ValidationResult = validate_batch(batch)

        report.validation_errors.extend(str(e) for e in result.errors)
        report.validation_warnings.extend(str(w) for w in result.warnings)

        if result.has_errors:
            detail: str = f"{result.error_count} error(s)"
        elif result.warning_count:
            detail = f"{result.warning_count} warning(s)"
        else:
            detail = "all checks passed"

        report.step_metrics.append(GenerationStepMetric(
            step_name="Validate Declarations",
            success=result.is_valid,
            elapsed_seconds=t.elapsed,
            detail=detail,
        ))

        for warn in result.warnings:
            logger.warning("  ⚠ %s", warn)
        for info in result.infos:
            logger.info("  ℹ %s", info)
        if result.has_errors:
            for err in result.errors:
                logger.error("  ✗ %s", err)
            return False
        return True

    def _step_prepare_output(
        self,
        config: GenerationConfig,
        report: GenerationReport,
    ) -> SourceExporter:
        output_dir: Optional[Path] = Path(config.output_dir) if config.output_dir else None
        exporter = SourceExporter(
            output_dir,
            file_extension=config.file_extension,
            atomic_writes=config.atomic_writes,
            dry_run=config.dry_run,
        )
        report.output_directory = str(exporter.output_dir)
        report.manifest = exporter.manifest
        return exporter

    def _package_for(self, model: ModelDeclaration, config: GenerationConfig) -> str:
        if model.package is not None:
            return model.package
        logger.warning(
            "Model '%s' has no package; using default package '%s'.",
            model.name,
            config.default_package,
        )
        return config.default_package

    def _step_build_schemas(
        self,
        batch: DeclarationBatch,
        config: GenerationConfig,
        graph: ReferenceGraph,
        identities: Dict[str, ModelIdentity],
        output_dir: Path,
        report: GenerationReport,
    ) -> List[TableSchema]:
        sorter: FieldSorter = self._field_sorter or (
            FieldSorter() if config.sort_fields else NoopFieldSorter()
        )
        search_paths: List[Path] = (
            resolve_search_paths(output_dir, config.source_folders)
            if config.sort_fields
            else []
        )

        schemas: List[TableSchema] = []
        with Timer("build_schemas") as t:
            for model in batch.models:
                try:
                    schema: TableSchema = build_schema(
                        model,
                        identities[model.qualified_name],
                        graph,
                        identities,
                        package_name=self._package_for(model, config),
                        field_sorter=sorter,
                        search_paths=search_paths,
                        errors=report.generation_errors,
                    )
                except NoColumnsError as exc:
                    logger.warning("%s", exc)
                    report.generation_errors.append(exc)
                    if exc.schema is None:
                        continue
                    schema = exc.schema
                schemas.append(schema)

        report.models_processed = len(schemas)
        report.schemas = schemas
        report.step_metrics.append(GenerationStepMetric(
            step_name="Build Schemas",
            success=not report.generation_errors,
            elapsed_seconds=t.elapsed,
            detail=(
                f"{len(schemas)} schemas, "
                f"{sum(len(s.columns) for s in schemas)} columns"
            ),
        ))
        return schemas

    def _step_emit(
        self,
        schemas: List[TableSchema],
        config: GenerationConfig,
        exporter: SourceExporter,
        report: GenerationReport,
    ) -> None:
        emitter = SourceEmitter(self._renderer, exporter, header=config.header)
        emitted: List[EmittedSource] = []
        with Timer("emit") as t:
            for schema in schemas:
                emitted.extend(emitter.emit(schema))

        report.step_metrics.append(GenerationStepMetric(
            step_name="Emit Sources",
            elapsed_seconds=t.elapsed,
            detail=f"{len(emitted)} files, {exporter.manifest.total_bytes:,} bytes",
        ))
        logger.info(
            "%s %d file(s) under %s in %.3fs.",
            "Rendered" if config.dry_run else "Wrote",
            len(emitted),
            exporter.output_dir,
            t.elapsed,
        )

    # -----------------------------------------------------------------
    # Internal: finalise report
    # -----------------------------------------------------------------

    def _finalise_report(
        self,
        report: GenerationReport,
        total_elapsed: float,
    ) -> GenerationReport:
        report.total_elapsed_seconds = total_elapsed
        report.success = not (
            report.fatal_error is not None
            or report.input_errors
            or report.validation_errors
            or report.generation_errors
        )
        return report


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "TableGenerator",
    "GenerationReport",
    "GenerationStepMetric",
    "load_declaration_file",
    "parse_declarations",
]

logger.debug("tablegen.generator loaded.")
