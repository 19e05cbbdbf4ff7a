from __future__ import annotations

from typing import Any, Dict, Tuple

from secconf_guard.issues import ErrorKind, ValidationIssue


class SecurityConfigError(Exception):
    """Base security config exception."""


class SecurityConfigValidationError(SecurityConfigError):
    """Raised on the first rule a proposed configuration change violates."""

    def __init__(self, issue: ValidationIssue) -> None:
        self.issue = issue
        super().__init__(f"{issue.kind.value}: {issue.message}")

    @property
    def kind(self) -> ErrorKind:
        return self.issue.kind

    @property
    def arguments(self) -> Tuple[Any, ...]:
        return self.issue.arguments

    def to_dict(self) -> Dict[str, Any]:
        return self.issue.to_mapping()


class ConfigNotFoundError(SecurityConfigError):
    """Raised when a requested configuration or registry entry is not found."""


class ConfigDuplicateError(SecurityConfigError):
    """Raised when attempting to register a duplicate registry entry or configuration."""


class ConfigPersistenceError(SecurityConfigError):
    """Raised when an accepted change could not be written through the persistence adapter."""
