"""principle-check - evaluate a structural code model against five design principles."""

from loguru import logger

from principle_check.checker import Checker, check
from principle_check.loader import build_model, load_model
from principle_check.model import (
    ClassEntity,
    DependencyEdge,
    DependencyKind,
    FieldDeclaration,
    InterfaceEntity,
    MethodSignature,
    Model,
    ModelError,
    NotFoundError,
    StateError,
    ValidationError,
)
from principle_check.report import Finding, Report, Severity

__version__ = "0.1.0"

# Library code stays quiet unless the application opts in (the CLI does on --verbose).
logger.disable("principle_check")

__all__ = [
    # Orchestration
    "Checker",
    "check",
    # Loading
    "build_model",
    "load_model",
    # Model
    "Model",
    "ClassEntity",
    "InterfaceEntity",
    "MethodSignature",
    "FieldDeclaration",
    "DependencyEdge",
    "DependencyKind",
    # Report
    "Finding",
    "Report",
    "Severity",
    # Exceptions
    "ModelError",
    "ValidationError",
    "StateError",
    "NotFoundError",
]
