"""
tests/conftest.py
Shared fixtures for the tablegen test suite.

No external mocking libraries are used; real file I/O is performed inside
temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import copy
import pathlib
from typing import Any, Callable, Dict, List

import pytest
import yaml

from tablegen.graph import ReferenceGraph, build_reference_graph
from tablegen.models import DeclarationBatch, ModelIdentity
from tablegen.naming import resolve_identities


# ---------------------------------------------------------------------------
# Raw declaration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def person_dict() -> Dict[str, Any]:
    """Scenario A: one flat model."""
    return {
        "package": "com.example",
        "models": [
            {
                "name": "Person",
                "fields": [
                    {"name": "name", "type": "java.lang.String"},
                    {"name": "age", "type": "int"},
                ],
            }
        ],
    }


@pytest.fixture()
def nested_dict() -> Dict[str, Any]:
    """Scenario B: Person nests Address through ``home``."""
    return {
        "package": "com.example",
        "models": [
            {
                "name": "Person",
                "fields": [
                    {"name": "name", "type": "java.lang.String"},
                    {"name": "age", "type": "int"},
                    {"name": "home", "type": "Address"},
                ],
            },
            {
                "name": "Address",
                "fields": [
                    {"name": "street", "type": "java.lang.String"},
                    {"name": "number", "type": "java.lang.Integer"},
                ],
            },
        ],
    }


@pytest.fixture()
def unsupported_dict() -> Dict[str, Any]:
    """Scenario C: a model whose only field has an unsupported type."""
    return {
        "package": "com.example",
        "models": [
            {
                "name": "Bag",
                "fields": [{"name": "items", "type": "java.util.HashMap"}],
            }
        ],
    }


@pytest.fixture()
def all_types_dict() -> Dict[str, Any]:
    """One field of every supported kind."""
    return {
        "package": "com.example.types",
        "models": [
            {
                "name": "Everything",
                "fields": [
                    {"name": "count", "type": "short"},
                    {"name": "flag", "type": "boolean"},
                    {"name": "label", "type": "java.lang.String"},
                    {"name": "created", "type": "java.util.Date"},
                    {"name": "photo", "type": "byte[]"},
                    {"name": "buffer", "type": "java.nio.ByteBuffer"},
                    {"name": "anything", "type": "java.lang.Object"},
                ],
            }
        ],
    }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def write_yaml(tmp_path: pathlib.Path) -> Callable[..., pathlib.Path]:
    """Return a function writing a dict to ``tmp_path/<name>`` as YAML."""

    def _write(data: Dict[str, Any], name: str = "models.yaml") -> pathlib.Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as fh:
            yaml.safe_dump(copy.deepcopy(data), fh, default_flow_style=False, sort_keys=False)
        return path

    return _write


def make_batch(raw: Dict[str, Any]) -> DeclarationBatch:
    return DeclarationBatch.model_validate(
        {"package": raw.get("package"), "models": raw["models"]}
    )


def resolve_all(batch: DeclarationBatch) -> tuple[ReferenceGraph, Dict[str, ModelIdentity]]:
    """Run the identity and graph phases the way the generator does."""
    graph = build_reference_graph(batch.models)
    identities = graph.annotate(resolve_identities(batch.models))
    return graph, identities


def list_files(root: pathlib.Path) -> List[str]:
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())
