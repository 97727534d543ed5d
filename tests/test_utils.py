"""
tests/test_utils.py
Unit tests for tablegen.utils and the configuration model.
"""

from __future__ import annotations

import pathlib

import pytest

from tablegen.models import DEFAULT_SOURCE_FOLDERS, DeclarationBatch, GenerationConfig
from tablegen.utils import (
    Timer,
    capitalize_first,
    count_lines,
    is_java_identifier,
    is_qualified_name,
    package_to_path,
    simple_type_name,
    write_file,
)


class TestNaming:
    @pytest.mark.parametrize(
        "name, expected",
        [("person", "Person"), ("Person", "Person"), ("eMail", "EMail"), ("x", "X"), ("", ""),
         ("\u01c6ab", "\u01c5ab"), ("\u00dfab", "\u00dfab")],
    )
    def test_capitalize_first(self, name: str, expected: str) -> None:
        assert capitalize_first(name) == expected

    @pytest.mark.parametrize("name", ["Person", "_x", "$value", "a1"])
    def test_java_identifiers(self, name: str) -> None:
        assert is_java_identifier(name)

    @pytest.mark.parametrize("name", ["1a", "first-name", "class", "null", "", "a b"])
    def test_not_java_identifiers(self, name: str) -> None:
        assert not is_java_identifier(name)

    def test_qualified_names(self) -> None:
        assert is_qualified_name("com.example.model")
        assert not is_qualified_name("com..example")

    def test_simple_type_name(self) -> None:
        assert simple_type_name("java.util.List<java.lang.String>") == "List"
        assert simple_type_name("Address") == "Address"

    def test_package_to_path(self) -> None:
        assert package_to_path("com.example") == pathlib.Path("com/example")
        assert package_to_path("") == pathlib.Path()


class TestFileHelpers:
    def test_atomic_write_leaves_no_temp_files(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "a" / "b" / "File.java"
        assert write_file(target, "héllo\n") == len("héllo\n".encode("utf-8"))
        assert target.read_text(encoding="utf-8") == "héllo\n"
        assert [p.name for p in target.parent.iterdir()] == ["File.java"]

    def test_plain_write(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "File.java"
        write_file(target, "x", atomic=False)
        assert target.read_text(encoding="utf-8") == "x"

    def test_count_lines(self) -> None:
        assert count_lines("") == 0
        assert count_lines("a") == 1
        assert count_lines("a\nb\n") == 2

    def test_timer(self) -> None:
        with Timer("noop") as t:
            pass
        assert t.elapsed >= 0.0
        assert "noop" in repr(t)


class TestGenerationConfig:
    def test_defaults(self) -> None:
        config = GenerationConfig()
        assert config.output_dir is None
        assert config.source_folders == DEFAULT_SOURCE_FOLDERS
        assert config.default_package == "com.tightdb.generated"
        assert config.file_extension == ".java"
        assert config.sort_fields and config.atomic_writes and not config.dry_run

    @pytest.mark.parametrize("raw", ["src:lib", "src,lib", "src;lib", " src : lib "])
    def test_source_folders_string_is_split(self, raw: str) -> None:
        assert GenerationConfig(source_folders=raw).source_folders == ["src", "lib"]

    def test_assignment_is_validated(self) -> None:
        config = GenerationConfig()
        config.source_folders = "a;b"
        assert config.source_folders == ["a", "b"]


class TestDeclarationBatch:
    def test_ambiguous_simple_name_is_left_alone(self) -> None:
        batch = DeclarationBatch.model_validate(
            {
                "models": [
                    {"name": "Address", "package": "a"},
                    {"name": "Address", "package": "b"},
                    {"name": "Person", "package": "a", "fields": [{"name": "home", "type": "Address"}]},
                ]
            }
        )
        assert batch.get_model("a.Person").fields[0].declared_type == "Address"
        assert batch.get_model("missing") is None
