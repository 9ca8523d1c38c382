"""Structural model of a codebase: classes, interfaces, methods and dependency edges.

Usage:
    model = Model()
    model.add_interface(InterfaceEntity("IDatabase", methods=(MethodSignature("Save"),)))
    model.add_class(ClassEntity("SqlDatabase", interfaces=("IDatabase",), methods=...))
    model.add_dependency_edge(DependencyEdge("UserRepository", "IDatabase"))
    model.freeze()                           # raises ValidationError on bad references
    model.class_by_name("SqlDatabase")       # raises NotFoundError on unknown names

The model is built once per analysis run. After ``freeze()`` every mutation
raises StateError and rules may only read it.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ModelError(Exception):
    """Base exception for all model errors."""


class ValidationError(ModelError):
    """Raised when the model is malformed or self-inconsistent."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        if self.errors:
            message = message + "\n" + "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(message)


class StateError(ModelError):
    """Raised when a frozen model is mutated."""


class NotFoundError(ModelError):
    """Raised when a class or interface name is not in the model."""


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

class DependencyKind(str, Enum):
    CONSTRUCTOR_INJECTED = "constructor-injected"
    DIRECTLY_INSTANTIATED = "directly-instantiated"


METHOD_KINDS = ("method", "getter", "setter")
VISIBILITIES = ("public", "private")


@dataclass(frozen=True)
class MethodSignature:
    """A method (or property accessor) declared by a class or interface.

    Attributes:
        name: Method name, unique within its owner.
        parameter_types: Ordered parameter type names.
        return_type: Return type name.
        throws_not_implemented: The body only raises "not implemented".
        also_mutates: Fields mutated as a side effect beyond the method's
            own target (a ``Width`` setter that also writes ``Height``).
        is_abstract: Declared abstract.
        is_virtual: Declared overridable.
        visibility: "public" or "private".
        kind: "method", "getter" or "setter".
    """

    name: str
    parameter_types: tuple[str, ...] = ()
    return_type: str = "void"
    throws_not_implemented: bool = False
    also_mutates: frozenset[str] = frozenset()
    is_abstract: bool = False
    is_virtual: bool = False
    visibility: str = "public"
    kind: str = "method"

    @property
    def is_public(self) -> bool:
        return self.visibility == "public"

    @property
    def is_accessor(self) -> bool:
        return self.kind in ("getter", "setter")

    def same_shape(self, other: "MethodSignature") -> bool:
        """True when parameter and return types match exactly."""
        return (
            self.parameter_types == other.parameter_types
            and self.return_type == other.return_type
        )


@dataclass(frozen=True)
class FieldDeclaration:
    name: str
    type: str = "object"
    visibility: str = "private"


@dataclass(frozen=True)
class InterfaceEntity:
    name: str
    methods: tuple[MethodSignature, ...] = ()

    @property
    def method_names(self) -> tuple[str, ...]:
        return tuple(m.name for m in self.methods)


@dataclass(frozen=True)
class ClassEntity:
    """A concrete or abstract class.

    Attributes:
        name: Class name, unique within the model.
        methods: Declared methods, in declaration order.
        fields: Declared fields.
        interfaces: Names of implemented interfaces.
        dependencies: Constructor parameter types.
        base_class: Name of the single base class, if any.
        is_abstract: Declared abstract.
    """

    name: str
    methods: tuple[MethodSignature, ...] = ()
    fields: tuple[FieldDeclaration, ...] = ()
    interfaces: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()
    base_class: str | None = None
    is_abstract: bool = False

    @property
    def method_names(self) -> tuple[str, ...]:
        return tuple(m.name for m in self.methods)

    @property
    def public_methods(self) -> tuple[MethodSignature, ...]:
        return tuple(m for m in self.methods if m.is_public)

    @property
    def is_extensible(self) -> bool:
        """Abstract, exposes abstract/virtual methods, or implements an interface."""
        if self.is_abstract or self.interfaces:
            return True
        return any(m.is_abstract or m.is_virtual for m in self.methods)

    def method(self, name: str, kind: str | None = None) -> MethodSignature | None:
        """First method called *name*; restricted to *kind* when given.

        A property getter and setter share a name, so callers comparing
        accessors pass the kind.
        """
        for m in self.methods:
            if m.name == name and (kind is None or m.kind == kind):
                return m
        return None


@dataclass(frozen=True)
class DependencyEdge:
    from_class: str
    to_type: str
    kind: DependencyKind = DependencyKind.CONSTRUCTOR_INJECTED


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

class Model:
    """Container for the entities of one analysis run."""

    def __init__(self) -> None:
        self._classes: dict[str, ClassEntity] = {}
        self._interfaces: dict[str, InterfaceEntity] = {}
        self._edges: list[DependencyEdge] = []
        self._frozen = False

    # ------------------------------------------------------------------
    # Build phase
    # ------------------------------------------------------------------

    def add_class(self, entity: ClassEntity) -> None:
        self._check_mutable("add_class")
        self._check_new_name(entity.name)
        _check_unique_methods(entity.name, entity.methods)
        self._classes[entity.name] = entity

    def add_interface(self, entity: InterfaceEntity) -> None:
        self._check_mutable("add_interface")
        self._check_new_name(entity.name)
        _check_unique_methods(entity.name, entity.methods)
        self._interfaces[entity.name] = entity

    def add_dependency_edge(self, edge: DependencyEdge) -> None:
        self._check_mutable("add_dependency_edge")
        if edge not in self._edges:
            self._edges.append(edge)

    def freeze(self) -> "Model":
        """Validate cross-references and make the model read-only.

        Raises:
            ValidationError: listing every broken reference found.
        """
        if self._frozen:
            return self
        errors = self._collect_errors()
        if errors:
            raise ValidationError("Invalid model:", errors)
        self._frozen = True
        return self

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def classes(self) -> tuple[ClassEntity, ...]:
        return tuple(self._classes.values())

    @property
    def interfaces(self) -> tuple[InterfaceEntity, ...]:
        return tuple(self._interfaces.values())

    @property
    def dependency_edges(self) -> tuple[DependencyEdge, ...]:
        return tuple(self._edges)

    def is_class(self, name: str) -> bool:
        return name in self._classes

    def is_interface(self, name: str) -> bool:
        return name in self._interfaces

    def class_by_name(self, name: str) -> ClassEntity:
        try:
            return self._classes[name]
        except KeyError:
            raise NotFoundError(f"Unknown class '{name}'") from None

    def interface_by_name(self, name: str) -> InterfaceEntity:
        try:
            return self._interfaces[name]
        except KeyError:
            raise NotFoundError(f"Unknown interface '{name}'") from None

    def interfaces_of(self, class_name: str) -> tuple[InterfaceEntity, ...]:
        entity = self.class_by_name(class_name)
        return tuple(self.interface_by_name(i) for i in entity.interfaces)

    def edges_from(self, class_name: str) -> tuple[DependencyEdge, ...]:
        self.class_by_name(class_name)
        return tuple(e for e in self._edges if e.from_class == class_name)

    def edges_to(self, type_name: str) -> tuple[DependencyEdge, ...]:
        if not (self.is_class(type_name) or self.is_interface(type_name)):
            raise NotFoundError(f"Unknown type '{type_name}'")
        return tuple(e for e in self._edges if e.to_type == type_name)

    def ancestors(self, class_name: str) -> tuple[ClassEntity, ...]:
        """Base-class chain of *class_name*, nearest first."""
        chain: list[ClassEntity] = []
        current = self.class_by_name(class_name)
        while current.base_class is not None:
            current = self.class_by_name(current.base_class)
            chain.append(current)
        return tuple(chain)

    def overridden_method(
        self, class_name: str, method_name: str, kind: str | None = None
    ) -> MethodSignature | None:
        """Return the nearest ancestor's declaration of *method_name*, if any."""
        for ancestor in self.ancestors(class_name):
            method = ancestor.method(method_name, kind)
            if method is not None:
                return method
        return None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _check_mutable(self, operation: str) -> None:
        if self._frozen:
            raise StateError(f"Cannot {operation}: the model is frozen")

    def _check_new_name(self, name: str) -> None:
        if not name:
            raise ValidationError("Entity names must not be empty")
        if name in self._classes or name in self._interfaces:
            raise ValidationError(f"Duplicate entity name '{name}'")

    def _collect_errors(self) -> list[str]:
        errors: list[str] = []

        for entity in self._classes.values():
            for iface in entity.interfaces:
                if iface not in self._interfaces:
                    errors.append(f"class '{entity.name}' implements unknown interface '{iface}'")
            if entity.base_class is not None and entity.base_class not in self._classes:
                errors.append(f"class '{entity.name}' extends unknown class '{entity.base_class}'")

        # Override checks need an acyclic, fully resolved hierarchy.
        cyclic = self._cyclic_classes()
        for name in cyclic:
            errors.append(f"class '{name}' is part of an inheritance cycle")
        if not errors:
            errors.extend(self._override_errors())

        for edge in self._edges:
            if edge.from_class not in self._classes:
                errors.append(
                    f"dependency edge {edge.from_class} -> {edge.to_type} starts at unknown class"
                )

        return errors

    def _cyclic_classes(self) -> list[str]:
        cyclic: list[str] = []
        for name in self._classes:
            seen = {name}
            current = self._classes[name].base_class
            while current is not None and current in self._classes:
                if current in seen:
                    cyclic.append(name)
                    break
                seen.add(current)
                current = self._classes[current].base_class
        return cyclic

    def _override_errors(self) -> list[str]:
        errors: list[str] = []
        for entity in self._classes.values():
            if entity.base_class is None:
                continue
            for method in entity.methods:
                base = self.overridden_method(entity.name, method.name, method.kind)
                if base is not None and not method.same_shape(base):
                    errors.append(
                        f"'{entity.name}.{method.name}' overrides with "
                        f"({', '.join(method.parameter_types)}) -> {method.return_type}, "
                        f"base declares ({', '.join(base.parameter_types)}) -> {base.return_type}"
                    )
        return errors


def _check_unique_methods(owner: str, methods: Iterable[MethodSignature]) -> None:
    seen: set[tuple[str, str]] = set()
    for method in methods:
        key = (method.name, method.kind)
        if key in seen:
            raise ValidationError(
                f"'{owner}' declares {method.kind} '{method.name}' more than once"
            )
        seen.add(key)
