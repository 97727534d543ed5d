"""
tests/test_validators.py
Unit tests for tablegen.validators.

Tests cover:
- Duplicate model and field names
- Duplicate and out-of-range field positions
- Java identifier rules for models, packages and fields
- Override spelling (warning only)
- Empty models (warning) and references outside the batch (info)
- The composite validate_batch entry point
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List

from conftest import make_batch

from tablegen.validators import (
    ValidationResult,
    validate_batch,
    validate_field_names,
    validate_field_positions,
    validate_model_names,
    validate_overrides,
    validate_references,
)


def codes(result: ValidationResult) -> List[str]:
    return [i.code for i in result.infos + result.warnings + result.errors]


class TestValidationResult:
    def test_levels_and_truthiness(self) -> None:
        result = ValidationResult()
        assert result and len(result) == 0
        result.add_info("I", "info")
        result.add_warning("W", "warning")
        assert result.is_valid
        result.add_error("E", "error", {"model": "x.M"})
        assert not result
        assert result.error_count == 1
        assert result.warning_count == 1
        assert codes(result) == ["I", "W", "E"]
        assert result.errors[0].context == {"model": "x.M"}

    def test_format_report_skips_info_by_default(self) -> None:
        result = ValidationResult()
        result.add_info("REF", "just so you know")
        result.add_warning("ODD", "looks odd")
        assert "[REF]" not in result.format_report()
        assert "[ODD]" in result.format_report()
        assert "[REF]" in result.format_report(include_info=True)


class TestIndividualValidators:
    def test_valid_batch(self, nested_dict: Dict[str, Any]) -> None:
        result = validate_batch(make_batch(nested_dict))
        assert result.is_valid
        assert len(result) == 0

    def test_duplicate_model_name(self, person_dict: Dict[str, Any]) -> None:
        raw = copy.deepcopy(person_dict)
        raw["models"].append(copy.deepcopy(raw["models"][0]))
        result = validate_model_names(make_batch(raw))
        assert codes(result) == ["DUPLICATE_MODEL_NAME"]

    def test_same_name_in_different_packages_is_fine(self) -> None:
        raw = {
            "models": [
                {"name": "Person", "package": "a", "fields": [{"name": "x", "type": "long"}]},
                {"name": "Person", "package": "b", "fields": [{"name": "x", "type": "long"}]},
            ]
        }
        assert validate_model_names(make_batch(raw)).is_valid

    def test_invalid_model_and_package_names(self) -> None:
        raw = {
            "models": [
                {"name": "class", "package": "com.example", "fields": [{"name": "x", "type": "long"}]},
                {"name": "Ok", "package": "com.1bad", "fields": [{"name": "x", "type": "long"}]},
            ]
        }
        assert codes(validate_model_names(make_batch(raw))) == [
            "INVALID_MODEL_NAME",
            "INVALID_PACKAGE_NAME",
        ]

    def test_model_without_fields_warns(self) -> None:
        result = validate_model_names(make_batch({"models": [{"name": "Empty"}]}))
        assert result.is_valid
        assert codes(result) == ["MODEL_WITHOUT_FIELDS"]

    def test_duplicate_and_invalid_field_names(self) -> None:
        raw = {
            "package": "com.example",
            "models": [
                {
                    "name": "Person",
                    "fields": [
                        {"name": "age", "type": "int"},
                        {"name": "age", "type": "long"},
                        {"name": "first-name", "type": "java.lang.String"},
                    ],
                }
            ],
        }
        result = validate_field_names(make_batch(raw))
        assert codes(result) == ["DUPLICATE_FIELD_NAME", "INVALID_FIELD_NAME"]

    def test_override_not_identifier_is_warning(self, person_dict: Dict[str, Any]) -> None:
        raw = copy.deepcopy(person_dict)
        raw["models"][0]["overrides"] = {"table": "People Table", "row": "PersonLine"}
        result = validate_overrides(make_batch(raw))
        assert result.is_valid
        assert codes(result) == ["OVERRIDE_NOT_IDENTIFIER"]
        assert result.warnings[0].context["artifact"] == "table"

    def test_reference_outside_batch_is_info(self) -> None:
        raw = {
            "package": "com.example",
            "models": [
                {
                    "name": "Person",
                    "fields": [
                        {"name": "home", "type": "Address"},
                        {"name": "tags", "type": "java.util.HashMap"},
                        {"name": "weight", "type": "double"},
                    ],
                }
            ],
        }
        result = validate_references(make_batch(raw))
        assert result.is_valid
        assert [i.context["field"] for i in result.infos] == ["home", "tags"]

    def test_validate_batch_merges_everything(self) -> None:
        raw = {
            "models": [
                {"name": "bad name", "fields": [{"name": "x", "type": "Missing"}]},
                {"name": "Empty", "overrides": {"view": "1View"}},
            ]
        }
        result = validate_batch(make_batch(raw))
        assert not result.is_valid
        assert set(codes(result)) == {
            "INVALID_MODEL_NAME",
            "MODEL_WITHOUT_FIELDS",
            "OVERRIDE_NOT_IDENTIFIER",
            "UNKNOWN_MODEL_REFERENCE",
        }

    def test_field_positions(self) -> None:
        raw = {
            "package": "com.example",
            "models": [
                {
                    "name": "Ok",
                    "fields": [
                        {"name": "b", "type": "long", "position": 1},
                        {"name": "a", "type": "long", "position": 0},
                    ],
                },
                {
                    "name": "Clash",
                    "fields": [
                        {"name": "a", "type": "long", "position": 0},
                        {"name": "b", "type": "long", "position": 0},
                        {"name": "c", "type": "long", "position": 7},
                    ],
                },
            ],
        }
        result = validate_field_positions(make_batch(raw))
        assert codes(result) == ["DUPLICATE_FIELD_POSITION", "FIELD_POSITION_OUT_OF_RANGE"]
        assert {i.context["model"] for i in result.errors} == {"com.example.Clash"}
