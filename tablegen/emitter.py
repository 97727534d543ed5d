# File: tablegen/emitter.py
"""
TableGen - Emission Pipeline
=============================

Renders the four artifacts of one schema (table, row, view, query) and hands
each to the exporter.

Every artifact is rendered against the same shared attributes plus its own
``name``.  The table artifact is rendered in two stages: the ``table_add`` and
``table_insert`` fragments are rendered first and passed to the ``table``
template as the ``add`` and ``insert`` attributes.

Schemas without columns are emitted like any other.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from tablegen.exporters import FileRecord, SourceExporter
from tablegen.models import GENERATED_HEADER, TableSchema
from tablegen.renderer import TemplateRenderer

logger: logging.Logger = logging.getLogger("tablegen.emitter")

# Artifact kinds in emission order.
ARTIFACT_KINDS: List[str] = ["table", "row", "view", "query"]


@dataclass(frozen=True, slots=True)
class EmittedSource:
    """One rendered artifact."""

    kind: str
    name: str
    package_name: str
    content: str
    record: Optional[FileRecord] = None


def shared_attributes(schema: TableSchema, header: str = GENERATED_HEADER) -> Dict[str, Any]:
    """Attributes common to every template of *schema*."""
    identity = schema.identity
    return {
        "columns": [c.to_attributes() for c in schema.columns],
        "is_nested": identity.is_nested,
        "package_name": schema.package_name,
        "table_name": identity.table_name,
        "row_name": identity.row_name,
        "view_name": identity.view_name,
        "query_name": identity.query_name,
        "header": header,
    }


class SourceEmitter:
    """Renders and persists the artifacts of one schema at a time."""

    def __init__(
        self,
        renderer: TemplateRenderer,
        exporter: Optional[SourceExporter] = None,
        *,
        header: str = GENERATED_HEADER,
    ) -> None:
        self._renderer: TemplateRenderer = renderer
        self._exporter: Optional[SourceExporter] = exporter
        self._header: str = header

    def render(self, schema: TableSchema) -> List[EmittedSource]:
        """Render the four artifacts of *schema* without writing them."""
        common: Dict[str, Any] = shared_attributes(schema, self._header)
        names: Dict[str, str] = schema.identity.names()
        sources: List[EmittedSource] = []

        for kind in ARTIFACT_KINDS:
            attributes: Dict[str, Any] = dict(common)
            attributes["name"] = names[kind]

            if kind == "table":
                attributes["add"] = self._renderer.render("table_add", common)
                attributes["insert"] = self._renderer.render("table_insert", common)

            content: str = self._renderer.render(kind, attributes)
            sources.append(
                EmittedSource(
                    kind=kind,
                    name=names[kind],
                    package_name=schema.package_name,
                    content=content,
                )
            )
        return sources

    def emit(self, schema: TableSchema) -> List[EmittedSource]:
        """Render the four artifacts of *schema* and write them through the exporter."""
        emitted: List[EmittedSource] = []
        for source in self.render(schema):
            record: Optional[FileRecord] = None
            if self._exporter is not None:
                record = self._exporter.write(source.package_name, source.name, source.content)
            emitted.append(
                EmittedSource(
                    kind=source.kind,
                    name=source.name,
                    package_name=source.package_name,
                    content=source.content,
                    record=record,
                )
            )

        logger.info(
            "Emitted %s for '%s'.",
            ", ".join(s.name for s in emitted),
            schema.qualified_name,
        )
        return emitted


__all__: List[str] = [
    "ARTIFACT_KINDS",
    "EmittedSource",
    "SourceEmitter",
    "shared_attributes",
]
