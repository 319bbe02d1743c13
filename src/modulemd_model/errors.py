"""
Error hierarchy for module metadata handling.

Every failure raised by the document, schema, upgrade and index layers
derives from ModulemdError so callers can catch the family at once.
"""

from __future__ import annotations


class ModulemdError(Exception):
    """Base class for all module metadata errors."""


class ParseError(ModulemdError):
    """Malformed YAML or an unusable document envelope."""

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
        document_index: int | None = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        self.document_index = document_index
        super().__init__(self._format())

    def _format(self) -> str:
        location = []
        if self.document_index is not None:
            location.append(f"document {self.document_index}")
        if self.line is not None:
            location.append(f"line {self.line}")
        if self.column is not None:
            location.append(f"column {self.column}")
        if not location:
            return self.message
        return f"{self.message} ({', '.join(location)})"


class ValidationError(ModulemdError):
    """Well-formed YAML that violates a schema rule."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        rule: str | None = None,
        expected_kind: str | None = None,
        actual_kind: str | None = None,
        components: tuple[str, ...] = (),
        line: int | None = None,
    ):
        self.message = message
        self.field = field
        self.rule = rule
        self.expected_kind = expected_kind
        self.actual_kind = actual_kind
        self.components = tuple(components)
        self.line = line
        super().__init__(message)


class UpgradeError(ModulemdError):
    """The requested schema version cannot be reached from the source."""


class DuplicateError(ModulemdError):
    """A stream identity is already present in an index with other content."""

    def __init__(self, message: str, *, nsvca: str | None = None):
        self.nsvca = nsvca
        super().__init__(message)


class EmitError(ModulemdError):
    """A node tree or stream could not be serialized."""
