# File: tablegen/graph.py
"""
TableGen - Reference Graph Builder
===================================

A model is *nested* (a subtable) when some field of some model in the same
batch is declared with that model's qualified name as its type; otherwise it
is a *top-level* table.  The test is purely structural: a model whose field
refers to itself counts as nested too.

The scan is quadratic in models × fields.  Batches are small and built once
per run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Sequence, Tuple

from tablegen.models import ModelDeclaration, ModelIdentity

logger: logging.Logger = logging.getLogger("tablegen.graph")


@dataclass(frozen=True, slots=True)
class ReferenceGraph:
    """Who-references-whom within one batch."""

    models: Tuple[str, ...] = ()
    edges: Tuple[Tuple[str, str, str], ...] = ()
    nested: FrozenSet[str] = field(default_factory=frozenset)

    def is_nested(self, qualified_name: str) -> bool:
        return qualified_name in self.nested

    @property
    def top_level(self) -> List[str]:
        """Models referenced by no field of the batch, in batch order."""
        return [m for m in self.models if m not in self.nested]

    @property
    def subtables(self) -> List[str]:
        """Nested models, in batch order."""
        return [m for m in self.models if m in self.nested]

    def referrers_of(self, qualified_name: str) -> List[str]:
        return [src for src, _, dst in self.edges if dst == qualified_name]

    def annotate(self, identities: Dict[str, ModelIdentity]) -> Dict[str, ModelIdentity]:
        """Return a copy of *identities* with ``is_nested`` set from this graph."""
        return {
            name: identity.model_copy(update={"is_nested": self.is_nested(name)})
            for name, identity in identities.items()
        }


def _is_referenced_by(model: ModelDeclaration, models: Sequence[ModelDeclaration]) -> bool:
    target: str = model.qualified_name
    for other in models:
        for fld in other.fields:
            if fld.declared_type == target:
                return True
    return False


def build_reference_graph(models: Sequence[ModelDeclaration]) -> ReferenceGraph:
    """Classify every model of the batch as nested or top-level."""
    names: Tuple[str, ...] = tuple(m.qualified_name for m in models)
    known: FrozenSet[str] = frozenset(names)

    edges: List[Tuple[str, str, str]] = []
    for model in models:
        for fld in model.fields:
            if fld.declared_type in known:
                edges.append((model.qualified_name, fld.name, fld.declared_type))

    nested: List[str] = []
    for model in models:
        if _is_referenced_by(model, models):
            logger.info("Detected subtable: %s", model.qualified_name)
            nested.append(model.qualified_name)
        else:
            logger.info("Detected top-level table: %s", model.qualified_name)

    return ReferenceGraph(models=names, edges=tuple(edges), nested=frozenset(nested))


__all__: List[str] = [
    "ReferenceGraph",
    "build_reference_graph",
]
