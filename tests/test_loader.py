"""Tests for principle_check/loader.py"""

import copy
import json
import textwrap
from pathlib import Path

import pytest

from principle_check.loader import MODEL_SCHEMA, build_model, load_model
from principle_check.model import DependencyKind, ValidationError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def write_model(tmp_path: Path, name: str, content: str) -> Path:
    p = tmp_path / name
    p.write_text(textwrap.dedent(content), encoding="utf-8")
    return p


VALID_YAML = """\
    interfaces:
      IDatabase:
        methods: [Save]
    classes:
      UserRepository:
        fields: ["database: IDatabase"]
        methods:
          - name: GetUsers
            returns: List<User>
        dependencies:
          - IDatabase
          - {type: SqlDatabase, kind: directly-instantiated}
      SqlDatabase:
        interfaces: [IDatabase]
        methods: [Save]
    """


# ---------------------------------------------------------------------------
# build_model() - happy path
# ---------------------------------------------------------------------------

def test_build_model_returns_frozen_model(database_model):
    model = build_model(database_model)
    assert model.is_frozen
    assert [c.name for c in model.classes] == ["SqlDatabase", "UserRepository"]
    assert [i.name for i in model.interfaces] == ["IDatabase"]


def test_build_model_empty_mapping():
    model = build_model({})
    assert model.classes == ()
    assert build_model(None).classes == ()


def test_method_strings_and_mappings(animal_model):
    model = build_model(animal_model)
    dog = model.class_by_name("Dog")
    assert dog.method_names == ("Walk", "Swim", "Fly")
    assert not dog.method("Walk").throws_not_implemented
    assert dog.method("Fly").throws_not_implemented


def test_methods_as_name_mapping():
    model = build_model({
        "classes": {"Order": {"methods": {"Total": {"returns": "decimal"}, "Print": None}}},
    })
    order = model.class_by_name("Order")
    assert order.method("Total").return_type == "decimal"
    assert order.method("Print").return_type == "void"


def test_also_mutates_and_setter_kind(rectangle_square):
    model = build_model(rectangle_square)
    width = model.class_by_name("Square").method("Width")
    assert width.also_mutates == frozenset({"Height"})
    assert width.kind == "setter"
    assert width.parameter_types == ("int",)


def test_dependencies_become_edges():
    model = build_model({
        "classes": {
            "SqlDatabase": {},
            "UserRepository": {
                "dependencies": ["ILogger", {"type": "SqlDatabase", "kind": "directly-instantiated"}],
            },
        },
    })
    edges = model.edges_from("UserRepository")
    assert [(e.to_type, e.kind) for e in edges] == [
        ("ILogger", DependencyKind.CONSTRUCTOR_INJECTED),
        ("SqlDatabase", DependencyKind.DIRECTLY_INSTANTIATED),
    ]
    # Only injected types are constructor parameters
    assert model.class_by_name("UserRepository").dependencies == ("ILogger",)


def test_fields_string_shorthand(order_model):
    model = build_model(order_model)
    (field,) = model.class_by_name("Order").fields
    assert field.name == "Items"
    assert field.type == "List<Item>"


def test_base_class_camel_case_alias(rectangle_square):
    camel = copy.deepcopy(rectangle_square)
    camel["classes"]["Square"]["baseClass"] = camel["classes"]["Square"].pop("base_class")
    model = build_model(camel)
    assert model.class_by_name("Square").base_class == "Rectangle"


# ---------------------------------------------------------------------------
# build_model() - malformed input
# ---------------------------------------------------------------------------

def test_top_level_must_be_mapping():
    with pytest.raises(ValidationError, match="mapping"):
        build_model(["not", "a", "mapping"])


def test_unknown_top_level_key():
    with pytest.raises(ValidationError, match="unknown top-level keys: modules"):
        build_model({"modules": {}})


def test_bad_dependency_kind():
    with pytest.raises(ValidationError, match="kind must be one of"):
        build_model({
            "classes": {"A": {"dependencies": [{"type": "B", "kind": "borrowed"}]}},
        })


def test_bad_method_kind_and_visibility_reported_together():
    with pytest.raises(ValidationError) as exc_info:
        build_model({
            "classes": {
                "A": {"methods": [
                    {"name": "Run", "kind": "property"},
                    {"name": "Stop", "visibility": "protected"},
                ]},
            },
        })
    assert len(exc_info.value.errors) == 2


def test_unknown_method_key():
    with pytest.raises(ValidationError, match="unknown keys: throws"):
        build_model({"classes": {"A": {"methods": [{"name": "Run", "throws": True}]}}})


def test_both_base_class_spellings_rejected():
    with pytest.raises(ValidationError, match="either base_class or baseClass"):
        build_model({
            "classes": {"A": {}, "B": {"base_class": "A", "baseClass": "A"}},
        })


@pytest.mark.parametrize("key", ["throws_not_implemented", "abstract", "virtual"])
def test_method_flags_must_be_booleans(key):
    with pytest.raises(ValidationError, match=f"{key} must be true or false"):
        build_model({"classes": {"A": {"methods": [{"name": "Run", key: "false"}]}}})


def test_class_abstract_flag_must_be_boolean():
    with pytest.raises(ValidationError, match="abstract must be true or false"):
        build_model({"classes": {"A": {"abstract": "yes"}}})


def test_unknown_interface_reference_fails_on_freeze():
    with pytest.raises(ValidationError, match="unknown interface 'IAnimal'"):
        build_model({"classes": {"Dog": {"interfaces": ["IAnimal"]}}})


def test_duplicate_name_across_classes_and_interfaces():
    with pytest.raises(ValidationError, match="Duplicate entity name 'Shape'"):
        build_model({"interfaces": {"Shape": {}}, "classes": {"Shape": {}}})


# ---------------------------------------------------------------------------
# load_model()
# ---------------------------------------------------------------------------

def test_load_yaml_model(tmp_path):
    p = write_model(tmp_path, "model.yaml", VALID_YAML)
    model = load_model(p)
    assert model.is_class("UserRepository")
    assert model.is_interface("IDatabase")
    assert len(model.dependency_edges) == 2


def test_load_json_model(tmp_path, animal_model):
    p = tmp_path / "model.json"
    p.write_text(json.dumps(animal_model), encoding="utf-8")
    model = load_model(str(p))
    assert model.class_by_name("Dog").interfaces == ("IAnimal",)


def test_load_missing_file(tmp_path):
    with pytest.raises(ValidationError, match="not found"):
        load_model(tmp_path / "missing.yaml")


def test_load_unparsable_json(tmp_path):
    p = write_model(tmp_path, "model.json", "{not json")
    with pytest.raises(ValidationError, match="Failed to parse"):
        load_model(p)


def test_load_unparsable_yaml(tmp_path):
    p = write_model(tmp_path, "model.yaml", "classes: [unclosed")
    with pytest.raises(ValidationError, match="Failed to parse"):
        load_model(p)


def test_load_invalid_utf8(tmp_path):
    p = tmp_path / "model.json"
    p.write_bytes(b"\xff\xfe{}")
    with pytest.raises(ValidationError, match="Failed to read"):
        load_model(p)


def test_load_directory(tmp_path):
    with pytest.raises(ValidationError, match="Failed to read"):
        load_model(tmp_path)


# ---------------------------------------------------------------------------
# MODEL_SCHEMA
# ---------------------------------------------------------------------------

def test_schema_is_json_serialisable_and_describes_both_sections():
    schema = json.loads(json.dumps(MODEL_SCHEMA))
    assert set(schema["properties"]) == {"classes", "interfaces"}
    kinds = (
        schema["properties"]["classes"]["additionalProperties"]["properties"]
        ["dependencies"]["items"]["oneOf"][1]["properties"]["kind"]["enum"]
    )
    assert kinds == ["constructor-injected", "directly-instantiated"]
