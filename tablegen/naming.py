# File: tablegen/naming.py
"""
TableGen - Name Resolver
=========================

Derives the four artifact names of a model.  Each name is either the explicit
override from the declaration or ``Capitalized(simple name) + suffix``.
Overrides apply independently: overriding ``table`` leaves the other three
derived.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from tablegen.models import ModelDeclaration, ModelIdentity, NameOverrides
from tablegen.utils import capitalize_first

logger: logging.Logger = logging.getLogger("tablegen.naming")

TABLE_SUFFIX: str = "Table"
ROW_SUFFIX: str = "Row"
VIEW_SUFFIX: str = "View"
QUERY_SUFFIX: str = "Query"


def resolve_identity(
    model: ModelDeclaration,
    overrides: Optional[NameOverrides] = None,
    nested: bool = False,
) -> ModelIdentity:
    """Resolve the identity of one model; *overrides* defaults to the model's own."""
    if overrides is None:
        overrides = model.overrides
    entity: str = capitalize_first(model.name)

    identity = ModelIdentity(
        table_name=overrides.table if overrides.table is not None else entity + TABLE_SUFFIX,
        row_name=overrides.row if overrides.row is not None else entity + ROW_SUFFIX,
        view_name=overrides.view if overrides.view is not None else entity + VIEW_SUFFIX,
        query_name=overrides.query if overrides.query is not None else entity + QUERY_SUFFIX,
        is_nested=nested,
    )
    logger.debug("Resolved identity of '%s': %s", model.qualified_name, identity.names())
    return identity


def resolve_identities(models: Sequence[ModelDeclaration]) -> Dict[str, ModelIdentity]:
    """
    Resolve every model of the batch, keyed by qualified name.

    Must complete before any schema is built: a referencing model needs the
    identity of the models it nests.
    """
    identities: Dict[str, ModelIdentity] = {}
    for model in models:
        identities[model.qualified_name] = resolve_identity(model)
    logger.info("Resolved identities for %d model(s).", len(identities))
    return identities


__all__: List[str] = [
    "TABLE_SUFFIX",
    "ROW_SUFFIX",
    "VIEW_SUFFIX",
    "QUERY_SUFFIX",
    "resolve_identity",
    "resolve_identities",
]
