"""
tests/test_graph.py
Unit tests for tablegen.graph (nested vs. top-level detection).
"""

from __future__ import annotations

from typing import Any, Dict

from conftest import make_batch, resolve_all

from tablegen.graph import build_reference_graph
from tablegen.models import DeclarationBatch, FieldDeclaration, ModelDeclaration


class TestReferenceGraph:
    def test_flat_model_is_top_level(self, person_dict: Dict[str, Any]) -> None:
        graph = build_reference_graph(make_batch(person_dict).models)
        assert graph.top_level == ["com.example.Person"]
        assert graph.subtables == []
        assert graph.edges == ()

    def test_referenced_model_is_nested(self, nested_dict: Dict[str, Any]) -> None:
        graph = build_reference_graph(make_batch(nested_dict).models)
        assert graph.is_nested("com.example.Address")
        assert not graph.is_nested("com.example.Person")
        assert graph.top_level == ["com.example.Person"]
        assert graph.subtables == ["com.example.Address"]
        assert graph.edges == (("com.example.Person", "home", "com.example.Address"),)
        assert graph.referrers_of("com.example.Address") == ["com.example.Person"]

    def test_self_reference_is_nested(self) -> None:
        node = ModelDeclaration(
            name="Node",
            package="com.example",
            fields=[
                FieldDeclaration(name="label", type="java.lang.String"),
                FieldDeclaration(name="children", type="com.example.Node"),
            ],
        )
        graph = build_reference_graph([node])
        assert graph.is_nested("com.example.Node")
        assert graph.top_level == []

    def test_reference_outside_batch_is_ignored(self) -> None:
        batch = DeclarationBatch(
            models=[
                ModelDeclaration(
                    name="Person",
                    package="com.example",
                    fields=[FieldDeclaration(name="home", type="com.other.Address")],
                )
            ]
        )
        graph = build_reference_graph(batch.models)
        assert graph.nested == frozenset()
        assert graph.edges == ()

    def test_annotate_sets_nested_flag(self, nested_dict: Dict[str, Any]) -> None:
        _, identities = resolve_all(make_batch(nested_dict))
        assert identities["com.example.Address"].is_nested is True
        assert identities["com.example.Person"].is_nested is False
