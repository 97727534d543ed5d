# File: tablegen/field_order.py
"""
TableGen - Field Order Correction
==================================

Some declaration sources do not preserve the order in which fields were
written.  ``FieldSorter`` restores it from the model's own source file: it
looks for ``<search path>/<package as path>/<Name>.java`` and orders the
fields by where their declarations appear in the body of ``class <Name>``.
Only top-level member text is searched; comments, literals, annotation
arguments and method bodies never match.

When no source file is found, or not every field can be located in it, the
order observed in the declaration is kept.

``NoopFieldSorter`` is the collaborator for declaration sources whose order is
already reliable.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from tablegen.models import FieldDeclaration, ModelDeclaration
from tablegen.utils import package_to_path, read_file

logger: logging.Logger = logging.getLogger("tablegen.field_order")

_SOURCE_SUFFIX: str = ".java"

# Comments and string/char literals, matched in one left-to-right pass.
_NON_CODE_RE: re.Pattern[str] = re.compile(
    r"/\*.*?\*/"
    r"|//[^\n]*"
    r'|"(?:\\.|[^"\\\n])*"'
    r"|'(?:\\.|[^'\\\n])*'",
    re.DOTALL,
)


def resolve_search_paths(output_dir: Path, source_folders: Sequence[str]) -> List[Path]:
    """
    Candidate roots for model sources.

    The output directory itself comes first, followed by every existing
    ``<dir>/<source folder>`` where ``<dir>`` walks from the output directory
    up through its ancestors, nearest first.
    """
    paths: List[Path] = [output_dir]
    current: Optional[Path] = output_dir
    while current is not None:
        for folder in source_folders:
            candidate: Path = current / folder
            if candidate.is_dir() and candidate not in paths:
                paths.append(candidate)
                logger.info("Configured source folder: %s", candidate)
        parent: Path = current.parent
        current = parent if parent != current else None
    return paths


def _blank(text: str) -> str:
    return re.sub(r"[^\n]", " ", text)


def _blank_non_code(text: str) -> str:
    """Replace comments and literals with spaces so offsets stay valid."""
    return _NON_CODE_RE.sub(lambda m: _blank(m.group(0)), text)


def _member_text(text: str, class_name: str) -> Optional[str]:
    """
    Keep only the top-level member declarations of ``class_name``'s body.

    Everything else (package and import lines, annotations on the type,
    parenthesised text such as annotation arguments and parameter lists,
    method bodies, nested types) is blanked.  Returns ``None`` when the type
    declaration cannot be found.
    """
    header: Optional[re.Match[str]] = re.search(
        rf"\b(?:class|interface|enum|record)\s+{re.escape(class_name)}\b", text
    )
    if header is None:
        return None
    start: int = text.find("{", header.end())
    if start < 0:
        return None

    kept: List[str] = list(_blank(text))
    depth: int = 1
    parens: int = 0
    for i in range(start + 1, len(text)):
        c: str = text[i]
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                break
        elif depth == 1:
            if c == "(":
                parens += 1
            elif c == ")":
                parens -= 1
            elif parens == 0:
                kept[i] = c
    return "".join(kept)


class FieldSorter:
    """Reorders fields to match their position in the model's source file."""

    def __init__(self, search_paths: Sequence[Path] = ()) -> None:
        self._search_paths: List[Path] = list(search_paths)

    @property
    def search_paths(self) -> List[Path]:
        return list(self._search_paths)

    def find_source(
        self,
        model: ModelDeclaration,
        search_paths: Optional[Sequence[Path]] = None,
    ) -> Optional[Path]:
        relative: Path = package_to_path(model.package or "") / f"{model.name}{_SOURCE_SUFFIX}"
        for root in search_paths if search_paths is not None else self._search_paths:
            candidate: Path = root / relative
            if candidate.is_file():
                return candidate
        return None

    def stable_order(
        self,
        fields: Sequence[FieldDeclaration],
        model: ModelDeclaration,
        search_paths: Optional[Sequence[Path]] = None,
    ) -> List[FieldDeclaration]:
        """Return *fields* in source declaration order (input order as fallback)."""
        ordered: List[FieldDeclaration] = list(fields)
        if len(ordered) < 2:
            return ordered

        source: Optional[Path] = self.find_source(model, search_paths)
        if source is None:
            logger.debug(
                "No source file for '%s'; keeping declared field order.",
                model.qualified_name,
            )
            return ordered

        text: Optional[str] = _member_text(_blank_non_code(read_file(source)), model.name)
        if text is None:
            logger.warning(
                "No declaration of type '%s' in %s; keeping declared field order.",
                model.name,
                source,
            )
            return ordered

        offsets: Dict[str, int] = {}
        for fld in ordered:
            pattern: re.Pattern[str] = re.compile(
                rf"\b{re.escape(fld.name)}\s*(?:=|;|,)"
            )
            match: Optional[re.Match[str]] = pattern.search(text)
            if match is None:
                logger.warning(
                    "Field '%s' of '%s' not found in %s; keeping declared field order.",
                    fld.name,
                    model.qualified_name,
                    source,
                )
                return ordered
            offsets[fld.name] = match.start()

        ordered.sort(key=lambda f: offsets[f.name])
        logger.debug(
            "Sorted fields of '%s' from %s: %s",
            model.qualified_name,
            source,
            [f.name for f in ordered],
        )
        return ordered


class NoopFieldSorter(FieldSorter):
    """Keeps the declared order unchanged."""

    def stable_order(
        self,
        fields: Sequence[FieldDeclaration],
        model: ModelDeclaration,
        search_paths: Optional[Sequence[Path]] = None,
    ) -> List[FieldDeclaration]:
        return list(fields)


__all__: List[str] = [
    "FieldSorter",
    "NoopFieldSorter",
    "resolve_search_paths",
]
