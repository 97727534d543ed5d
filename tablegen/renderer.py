# File: tablegen/renderer.py
"""
TableGen - Template Renderer
=============================

Jinja2-backed implementation of ``render(template_id, attributes) -> text``.
The emitter treats the result as opaque text.

Templates live next to this module in ``templates/``; a different directory
can be passed for custom output flavours.  Undefined attributes raise instead
of rendering as empty strings.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from tablegen.errors import TableGenError
from tablegen.utils import capitalize_first

logger: logging.Logger = logging.getLogger("tablegen.renderer")

TEMPLATES_DIR: Path = Path(__file__).resolve().parent / "templates"

# Template id → file name inside the templates directory.
TEMPLATE_FILES: Dict[str, str] = {
    "table": "table.java.j2",
    "row": "row.java.j2",
    "view": "view.java.j2",
    "query": "query.java.j2",
    "table_add": "table_add.java.j2",
    "table_insert": "table_insert.java.j2",
}


class TemplateRenderError(TableGenError):
    """A template is unknown or failed to render."""

    code = "TEMPLATE_RENDER"


class TemplateRenderer:
    """Renders the six artifact templates with Jinja2."""

    def __init__(self, templates_dir: Optional[Path] = None) -> None:
        self._templates_dir: Path = templates_dir or TEMPLATES_DIR
        self._env: Environment = Environment(
            loader=FileSystemLoader(str(self._templates_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["capfirst"] = capitalize_first
        logger.debug("TemplateRenderer initialised (templates=%s).", self._templates_dir)

    @property
    def templates_dir(self) -> Path:
        return self._templates_dir

    def render(self, template_id: str, attributes: Mapping[str, Any]) -> str:
        """Render *template_id* against *attributes*."""
        file_name: Optional[str] = TEMPLATE_FILES.get(template_id)
        if file_name is None:
            raise TemplateRenderError(
                f"Unknown template '{template_id}'. "
                f"Expected one of: {', '.join(sorted(TEMPLATE_FILES))}."
            )
        try:
            template = self._env.get_template(file_name)
            return template.render(dict(attributes))
        except TemplateError as exc:
            raise TemplateRenderError(
                f"Failed to render template '{template_id}': {exc}"
            ) from exc


__all__: List[str] = [
    "TEMPLATES_DIR",
    "TEMPLATE_FILES",
    "TemplateRenderError",
    "TemplateRenderer",
]
