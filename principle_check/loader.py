"""Build a frozen Model from a nested mapping or a JSON/YAML model file.

Usage:
    model = load_model("model.yaml")   # raises ValidationError on bad input
    model = build_model({"classes": {...}, "interfaces": {...}})

Shape problems are collected and reported together; cross-reference checks
(unknown interfaces, base classes, override mismatches) happen in
``Model.freeze()``.
"""

import json
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from principle_check.model import (
    METHOD_KINDS,
    VISIBILITIES,
    ClassEntity,
    DependencyEdge,
    DependencyKind,
    FieldDeclaration,
    InterfaceEntity,
    MethodSignature,
    Model,
    ValidationError,
)

_METHOD_KEYS = {
    "name", "parameters", "returns", "throws_not_implemented", "also_mutates",
    "abstract", "virtual", "visibility", "kind",
}
_CLASS_KEYS = {
    "methods", "fields", "interfaces", "dependencies", "base_class", "baseClass", "abstract",
}
_INTERFACE_KEYS = {"methods"}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_model(path: str | Path) -> Model:
    """Read a ``.json`` or YAML model file and return a frozen Model.

    Raises:
        ValidationError: if the file is missing, unreadable, unparsable or
                         describes an invalid model.
    """
    path = Path(path)
    if not path.exists():
        raise ValidationError(f"Model file not found: '{path}'")

    logger.debug("Loading model from {}", path)
    try:
        with path.open(encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ValidationError(f"Failed to parse '{path}': {exc}") from exc
    except (UnicodeDecodeError, OSError) as exc:
        raise ValidationError(f"Failed to read '{path}': {exc}") from exc

    return build_model(data)


def build_model(data: Any) -> Model:
    """Build and freeze a Model from the nested mapping format."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("The model must be a mapping at the top level.")

    errors: list[str] = []
    unknown = set(data) - {"classes", "interfaces"}
    if unknown:
        errors.append(f"unknown top-level keys: {', '.join(sorted(unknown))}")

    interfaces = _mapping(data.get("interfaces"), "interfaces", errors)
    classes = _mapping(data.get("classes"), "classes", errors)

    model = Model()
    for name, spec in interfaces.items():
        entity = _parse_interface(str(name), spec, errors)
        if entity is not None:
            _add(model.add_interface, entity, errors)

    edges: list[DependencyEdge] = []
    for name, spec in classes.items():
        parsed = _parse_class(str(name), spec, errors)
        if parsed is not None:
            entity, class_edges = parsed
            _add(model.add_class, entity, errors)
            edges.extend(class_edges)

    if errors:
        raise ValidationError("Malformed model:", errors)

    for edge in edges:
        model.add_dependency_edge(edge)

    model.freeze()
    logger.debug(
        "Built model: {} classes, {} interfaces, {} dependency edges",
        len(model.classes), len(model.interfaces), len(model.dependency_edges),
    )
    return model


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _add(add, entity, errors: list[str]) -> None:
    try:
        add(entity)
    except ValidationError as exc:
        errors.append(str(exc))


def _mapping(value: Any, where: str, errors: list[str]) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        errors.append(f"'{where}' must be a mapping of name -> definition")
        return {}
    return value


def _string_list(value: Any, where: str, errors: list[str]) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        errors.append(f"{where} must be a list of strings")
        return ()
    return tuple(value)


def _flag(value: Any, where: str, errors: list[str]) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        errors.append(f"{where} must be true or false (got {value!r})")
        return False
    return value


def _parse_interface(name: str, spec: Any, errors: list[str]) -> InterfaceEntity | None:
    spec = spec or {}
    if not isinstance(spec, dict):
        errors.append(f"interface '{name}' must be a mapping")
        return None
    unknown = set(spec) - _INTERFACE_KEYS
    if unknown:
        errors.append(f"interface '{name}' has unknown keys: {', '.join(sorted(unknown))}")
    methods = _parse_methods(spec.get("methods"), f"interface '{name}'", errors)
    return InterfaceEntity(name=name, methods=methods)


def _parse_class(
    name: str, spec: Any, errors: list[str]
) -> tuple[ClassEntity, list[DependencyEdge]] | None:
    spec = spec or {}
    if not isinstance(spec, dict):
        errors.append(f"class '{name}' must be a mapping")
        return None
    where = f"class '{name}'"

    unknown = set(spec) - _CLASS_KEYS
    if unknown:
        errors.append(f"{where} has unknown keys: {', '.join(sorted(unknown))}")

    if "base_class" in spec and "baseClass" in spec:
        errors.append(f"{where}: give either base_class or baseClass, not both")
    base_class = spec.get("base_class", spec.get("baseClass"))
    if base_class is not None and not isinstance(base_class, str):
        errors.append(f"{where}: base_class must be a string")
        base_class = None

    edges, injected = _parse_dependencies(name, spec.get("dependencies"), errors)
    entity = ClassEntity(
        name=name,
        methods=_parse_methods(spec.get("methods"), where, errors),
        fields=_parse_fields(spec.get("fields"), where, errors),
        interfaces=_string_list(spec.get("interfaces"), f"{where}: interfaces", errors),
        dependencies=injected,
        base_class=base_class,
        is_abstract=_flag(spec.get("abstract"), f"{where}: abstract", errors),
    )
    return entity, edges


def _parse_methods(value: Any, where: str, errors: list[str]) -> tuple[MethodSignature, ...]:
    if value is None:
        return ()
    if isinstance(value, dict):
        # name -> spec shorthand
        value = [{"name": k, **(v if isinstance(v, dict) else {})} for k, v in value.items()]
    if not isinstance(value, list):
        errors.append(f"{where}: methods must be a list")
        return ()

    methods: list[MethodSignature] = []
    for item in value:
        if isinstance(item, str):
            methods.append(MethodSignature(name=item))
            continue
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            errors.append(f"{where}: each method needs a string 'name'")
            continue

        label = f"{where} method '{item['name']}'"
        unknown = set(item) - _METHOD_KEYS
        if unknown:
            errors.append(f"{label} has unknown keys: {', '.join(sorted(unknown))}")

        kind = item.get("kind", "method")
        if kind not in METHOD_KINDS:
            errors.append(f"{label}: kind must be one of {', '.join(METHOD_KINDS)}")
        visibility = item.get("visibility", "public")
        if visibility not in VISIBILITIES:
            errors.append(f"{label}: visibility must be one of {', '.join(VISIBILITIES)}")

        methods.append(MethodSignature(
            name=item["name"],
            parameter_types=_string_list(item.get("parameters"), f"{label}: parameters", errors),
            return_type=str(item.get("returns", "void")),
            throws_not_implemented=_flag(
                item.get("throws_not_implemented"), f"{label}: throws_not_implemented", errors
            ),
            also_mutates=frozenset(
                _string_list(item.get("also_mutates"), f"{label}: also_mutates", errors)
            ),
            is_abstract=_flag(item.get("abstract"), f"{label}: abstract", errors),
            is_virtual=_flag(item.get("virtual"), f"{label}: virtual", errors),
            visibility=visibility,
            kind=kind,
        ))
    return tuple(methods)


def _parse_fields(value: Any, where: str, errors: list[str]) -> tuple[FieldDeclaration, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        errors.append(f"{where}: fields must be a list")
        return ()

    fields: list[FieldDeclaration] = []
    for item in value:
        if isinstance(item, str):
            # "name: type" or just "name"
            name, _, type_ = item.partition(":")
            fields.append(FieldDeclaration(name=name.strip(), type=type_.strip() or "object"))
        elif isinstance(item, dict) and isinstance(item.get("name"), str):
            fields.append(FieldDeclaration(
                name=item["name"],
                type=str(item.get("type", "object")),
                visibility=str(item.get("visibility", "private")),
            ))
        else:
            errors.append(f"{where}: each field must be a string or a mapping with 'name'")
    return tuple(fields)


def _parse_dependencies(
    class_name: str, value: Any, errors: list[str]
) -> tuple[list[DependencyEdge], tuple[str, ...]]:
    if value is None:
        return [], ()
    if not isinstance(value, list):
        errors.append(f"class '{class_name}': dependencies must be a list")
        return [], ()

    edges: list[DependencyEdge] = []
    injected: list[str] = []
    for item in value:
        if isinstance(item, str):
            target, kind = item, DependencyKind.CONSTRUCTOR_INJECTED
        elif isinstance(item, dict) and isinstance(item.get("type"), str):
            target = item["type"]
            try:
                kind = DependencyKind(item.get("kind", DependencyKind.CONSTRUCTOR_INJECTED.value))
            except ValueError:
                errors.append(
                    f"class '{class_name}' dependency '{target}': kind must be one of "
                    f"{', '.join(k.value for k in DependencyKind)}"
                )
                continue
        else:
            errors.append(f"class '{class_name}': each dependency needs a string 'type'")
            continue

        edges.append(DependencyEdge(from_class=class_name, to_type=target, kind=kind))
        if kind is DependencyKind.CONSTRUCTOR_INJECTED:
            injected.append(target)
    return edges, tuple(injected)


# ---------------------------------------------------------------------------
# JSON schema (printed by the `schema` command)
# ---------------------------------------------------------------------------

_STRINGS = {"type": "array", "items": {"type": "string"}}

_METHOD_SCHEMA = {
    "oneOf": [
        {"type": "string"},
        {
            "type": "object",
            "required": ["name"],
            "additionalProperties": False,
            "properties": {
                "name":                   {"type": "string"},
                "parameters":             _STRINGS,
                "returns":                {"type": "string", "default": "void"},
                "throws_not_implemented": {"type": "boolean", "default": False},
                "also_mutates":           _STRINGS,
                "abstract":               {"type": "boolean", "default": False},
                "virtual":                {"type": "boolean", "default": False},
                "visibility":             {"enum": list(VISIBILITIES), "default": "public"},
                "kind":                   {"enum": list(METHOD_KINDS), "default": "method"},
            },
        },
    ],
}

MODEL_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "principle-check structural model",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "interfaces": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "additionalProperties": False,
                "properties": {"methods": {"type": "array", "items": _METHOD_SCHEMA}},
            },
        },
        "classes": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "methods":    {"type": "array", "items": _METHOD_SCHEMA},
                    "fields": {
                        "type": "array",
                        "items": {
                            "oneOf": [
                                {"type": "string", "description": "'name' or 'name: type'"},
                                {
                                    "type": "object",
                                    "required": ["name"],
                                    "properties": {
                                        "name":       {"type": "string"},
                                        "type":       {"type": "string"},
                                        "visibility": {"enum": list(VISIBILITIES)},
                                    },
                                },
                            ],
                        },
                    },
                    "interfaces": _STRINGS,
                    "base_class": {"type": ["string", "null"]},
                    "baseClass":  {"type": ["string", "null"], "description": "alias of base_class"},
                    "abstract":   {"type": "boolean", "default": False},
                    "dependencies": {
                        "type": "array",
                        "items": {
                            "oneOf": [
                                {"type": "string", "description": "constructor-injected type"},
                                {
                                    "type": "object",
                                    "required": ["type"],
                                    "properties": {
                                        "type": {"type": "string"},
                                        "kind": {
                                            "enum": [k.value for k in DependencyKind],
                                            "default": DependencyKind.CONSTRUCTOR_INJECTED.value,
                                        },
                                    },
                                },
                            ],
                        },
                    },
                },
            },
        },
    },
}
