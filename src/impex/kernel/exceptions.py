"""Exception hierarchy for impex.

All errors raised while exporting or importing object graphs inherit from
:class:`ImpexException`. Callers catch the base class to abort a top-level
export/import call, or a specific subclass for targeted handling.
"""

from __future__ import annotations

from typing import Any, ClassVar

from impex.kernel.types import ErrorCategory

# =============================================================================
# Base Exception
# =============================================================================


class ImpexException(Exception):
    """Base exception for all impex errors.

    Carries an error code and a context dict identifying the offending class,
    property and value, so a failure can be diagnosed without a debugger.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code. Defaults to the category value
            of the subclass.
        context: Key-value pairs such as ``entity``, ``property`` and ``value``.
    """

    category: ClassVar[ErrorCategory | None] = None

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        if code is None and self.category is not None:
            code = self.category.value
        self.code = code
        self.context: dict[str, Any] = context if context is not None else {}


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationException(ImpexException):
    """A collaborator is missing or settings are invalid."""

    category = ErrorCategory.CONFIGURATION


# =============================================================================
# Schema / metadata
# =============================================================================


class SchemaException(ImpexException):
    """A class cannot take part in the mapping as declared.

    Raised for unknown, interface or abstract classes and for classes without
    exportable or importable properties where some were required.
    """

    category = ErrorCategory.SCHEMA


class AmbiguousTypeException(SchemaException):
    """A union type names more than one class alternative."""


class PropertyAccessException(SchemaException):
    """A declared property cannot be read from an instance."""


# =============================================================================
# Payload
# =============================================================================


class ShapeException(ImpexException):
    """A payload value is not the expected container or subtype."""

    category = ErrorCategory.SHAPE


class NullPolicyException(ImpexException):
    """``None`` was supplied for a property that does not accept it."""

    category = ErrorCategory.NULL_POLICY


class UnresolvedReferenceException(ImpexException):
    """A referenced identifier is not mapped yet or not found in the store."""

    category = ErrorCategory.REFERENCE


class UnknownShapeException(ImpexException):
    """None of the recognised value shapes matched a property."""

    category = ErrorCategory.UNKNOWN_SHAPE
