"""
tests/test_field_order.py
Unit tests for tablegen.field_order (source-based field order correction).
"""

from __future__ import annotations

import pathlib
import textwrap

import pytest

from tablegen.field_order import FieldSorter, NoopFieldSorter, resolve_search_paths
from tablegen.models import FieldDeclaration, ModelDeclaration


PERSON_SOURCE: str = textwrap.dedent(
    """\
    package com.example;

    /* age; comes later */
    public class Person {
        // age = 3;
        String name;
        int age, height;
    }
    """
)


@pytest.fixture()
def source_root(tmp_path: pathlib.Path) -> pathlib.Path:
    root = tmp_path / "src"
    target = root / "com" / "example"
    target.mkdir(parents=True)
    (target / "Person.java").write_text(PERSON_SOURCE, encoding="utf-8")
    return root


@pytest.fixture()
def shuffled_person() -> ModelDeclaration:
    return ModelDeclaration(
        name="Person",
        package="com.example",
        fields=[
            FieldDeclaration(name="height", type="int"),
            FieldDeclaration(name="age", type="int"),
            FieldDeclaration(name="name", type="java.lang.String"),
        ],
    )


class TestFieldSorter:
    def test_find_source(self, source_root: pathlib.Path, shuffled_person: ModelDeclaration) -> None:
        sorter = FieldSorter([source_root])
        assert sorter.find_source(shuffled_person) == source_root / "com" / "example" / "Person.java"

    def test_orders_by_source_position_ignoring_comments(
        self, source_root: pathlib.Path, shuffled_person: ModelDeclaration
    ) -> None:
        sorter = FieldSorter([source_root])
        ordered = sorter.stable_order(shuffled_person.fields, shuffled_person)
        assert [f.name for f in ordered] == ["name", "age", "height"]

    def test_search_paths_argument_overrides_constructor(
        self, source_root: pathlib.Path, shuffled_person: ModelDeclaration, tmp_path: pathlib.Path
    ) -> None:
        sorter = FieldSorter([tmp_path / "nowhere"])
        ordered = sorter.stable_order(shuffled_person.fields, shuffled_person, [source_root])
        assert [f.name for f in ordered] == ["name", "age", "height"]

    def test_no_source_keeps_declared_order(
        self, tmp_path: pathlib.Path, shuffled_person: ModelDeclaration
    ) -> None:
        sorter = FieldSorter([tmp_path])
        ordered = sorter.stable_order(shuffled_person.fields, shuffled_person)
        assert [f.name for f in ordered] == ["height", "age", "name"]

    def test_unknown_field_keeps_declared_order(self, source_root: pathlib.Path) -> None:
        model = ModelDeclaration(
            name="Person",
            package="com.example",
            fields=[
                FieldDeclaration(name="age", type="int"),
                FieldDeclaration(name="nickname", type="java.lang.String"),
            ],
        )
        ordered = FieldSorter([source_root]).stable_order(model.fields, model)
        assert [f.name for f in ordered] == ["age", "nickname"]

    def _write(self, root: pathlib.Path, package: str, name: str, text: str) -> None:
        target = root.joinpath(*package.split("."))
        target.mkdir(parents=True, exist_ok=True)
        (target / f"{name}.java").write_text(text, encoding="utf-8")

    def test_package_line_does_not_match_field(self, tmp_path: pathlib.Path) -> None:
        self._write(
            tmp_path,
            "com.acme.model",
            "Car",
            "package com.acme.model; class Car { String make; String model; }",
        )
        model = ModelDeclaration(
            name="Car",
            package="com.acme.model",
            fields=[
                FieldDeclaration(name="make", type="java.lang.String"),
                FieldDeclaration(name="model", type="java.lang.String"),
            ],
        )
        ordered = FieldSorter([tmp_path]).stable_order(model.fields, model)
        assert [f.name for f in ordered] == ["make", "model"]

    def test_annotation_arguments_do_not_match_field(self, tmp_path: pathlib.Path) -> None:
        self._write(
            tmp_path,
            "com.acme",
            "Entry",
            textwrap.dedent(
                """\
                package com.acme;

                @Table(row = "EntryCursor")
                class Entry {
                    String title;
                    long row;
                }
                """
            ),
        )
        model = ModelDeclaration(
            name="Entry",
            package="com.acme",
            fields=[
                FieldDeclaration(name="title", type="java.lang.String"),
                FieldDeclaration(name="row", type="long"),
            ],
        )
        ordered = FieldSorter([tmp_path]).stable_order(model.fields, model)
        assert [f.name for f in ordered] == ["title", "row"]

    def test_literals_and_method_bodies_do_not_match_field(self, tmp_path: pathlib.Path) -> None:
        self._write(
            tmp_path,
            "com.acme",
            "Note",
            textwrap.dedent(
                """\
                package com.acme;

                class Note {
                    String label = "body;";
                    void reset(String body, int size) { size = 0; }
                    int size;
                    String body;
                }
                """
            ),
        )
        model = ModelDeclaration(
            name="Note",
            package="com.acme",
            fields=[
                FieldDeclaration(name="body", type="java.lang.String"),
                FieldDeclaration(name="size", type="int"),
                FieldDeclaration(name="label", type="java.lang.String"),
            ],
        )
        ordered = FieldSorter([tmp_path]).stable_order(model.fields, model)
        assert [f.name for f in ordered] == ["label", "size", "body"]

    def test_missing_type_declaration_keeps_declared_order(self, tmp_path: pathlib.Path) -> None:
        self._write(tmp_path, "com.acme", "Ghost", "package com.acme; class Other { int b; int a; }")
        model = ModelDeclaration(
            name="Ghost",
            package="com.acme",
            fields=[
                FieldDeclaration(name="a", type="int"),
                FieldDeclaration(name="b", type="int"),
            ],
        )
        ordered = FieldSorter([tmp_path]).stable_order(model.fields, model)
        assert [f.name for f in ordered] == ["a", "b"]

    def test_noop_sorter(self, source_root: pathlib.Path, shuffled_person: ModelDeclaration) -> None:
        ordered = NoopFieldSorter([source_root]).stable_order(shuffled_person.fields, shuffled_person)
        assert [f.name for f in ordered] == ["height", "age", "name"]


class TestResolveSearchPaths:
    def test_output_dir_first_then_existing_ancestor_folders(self, tmp_path: pathlib.Path) -> None:
        project = tmp_path / "project"
        (project / "src" / "main" / "java").mkdir(parents=True)
        output = project / "build" / "generated"

        paths = resolve_search_paths(output, ["src", "src/main/java", "src/test/java"])

        assert paths[0] == output
        assert project / "src" in paths
        assert project / "src" / "main" / "java" in paths
        assert project / "src" / "test" / "java" not in paths
        assert project / "build" / "src" not in paths

    def test_source_folder_inside_output_dir(self, tmp_path: pathlib.Path) -> None:
        output = tmp_path / "out"
        (output / "src").mkdir(parents=True)
        paths = resolve_search_paths(output, ["src"])
        assert paths[:2] == [output, output / "src"]

    def test_nearest_ancestor_first(self, tmp_path: pathlib.Path) -> None:
        (tmp_path / "src").mkdir()
        inner = tmp_path / "module"
        (inner / "src").mkdir(parents=True)
        paths = resolve_search_paths(inner / "out", ["src"])
        assert paths.index(inner / "src") < paths.index(tmp_path / "src")
