from __future__ import annotations

import logging
from typing import Any, ClassVar, NoReturn, Optional

from secconf_guard.capabilities import Capability, CapabilityRegistry
from secconf_guard.encoders import EncoderDescriptor, EncoderRegistry
from secconf_guard.exceptions import SecurityConfigValidationError
from secconf_guard.issues import ErrorKind, ValidationIssue
from secconf_guard.model import CONFIG_TYPES, NamedConfig, ServiceKind
from secconf_guard.snapshot import SecuritySnapshot
from secconf_guard.utils import _is_blank

logger = logging.getLogger("secconf_guard.validation")
logger.addHandler(logging.NullHandler())


def fail(kind: ErrorKind, *arguments: Any) -> NoReturn:
    issue = ValidationIssue(kind, tuple(arguments))
    logger.debug("Rule violated: %s arguments=%r", kind.value, issue.arguments)
    raise SecurityConfigValidationError(issue)


class BaseSecurityValidator:
    """Checks shared by every rule chain: names, implementations and encoders."""

    def __init__(
        self,
        capabilities: CapabilityRegistry,
        encoders: EncoderRegistry,
        strong_encryption_available: bool,
    ) -> None:
        self.capabilities = capabilities
        self.encoders = encoders
        self.strong_encryption_available = strong_encryption_available

    def check_name(self, required_kind: ServiceKind, name: Optional[str]) -> None:
        if _is_blank(name):
            fail(ErrorKind.NAME_REQUIRED)

    def check_capability(
        self, required_kind: ServiceKind, implementation_id: Optional[str]
    ) -> Capability:
        if implementation_id is None or _is_blank(implementation_id):
            fail(ErrorKind.CLASSNAME_REQUIRED)
        capability = self.capabilities.resolve(implementation_id)
        if capability is None:
            fail(ErrorKind.CLASS_NOT_FOUND, implementation_id)
        if not self.capabilities.satisfies(required_kind, capability):
            fail(ErrorKind.CLASS_WRONG_TYPE, required_kind, implementation_id)
        return capability

    def lookup_encoder(self, name: str) -> EncoderDescriptor:
        return self.encoders.lookup(name)

    def rejects_strong(self, encoder: EncoderDescriptor) -> bool:
        return encoder.is_reversible_strong and not self.strong_encryption_available


class NamedServiceValidator(BaseSecurityValidator):
    """Add/modify/remove rule chain for one service kind.

    Subclasses set ``kind`` and override ``validate_fields`` for field rules,
    ``check_undeletable`` for unconditional removal guards and ``check_not_active``
    for references held by the manager config or active siblings.
    """

    kind: ClassVar[ServiceKind]

    @property
    def already_exists(self) -> ErrorKind:
        return ErrorKind[f"{self.kind.error_prefix}_ALREADY_EXISTS"]

    @property
    def not_found(self) -> ErrorKind:
        return ErrorKind[f"{self.kind.error_prefix}_NOT_FOUND"]

    def validate_add(self, snapshot: SecuritySnapshot, config: NamedConfig) -> None:
        self._check_type(config)
        self.check_name(self.kind, config.name)
        capability = self.check_capability(self.kind, config.implementation_id)
        if snapshot.has(self.kind, config.name):
            fail(self.already_exists, config.name)
        self.validate_fields(snapshot, config)
        self._run_implementation_rules(capability, snapshot, config)

    def validate_modified(
        self, snapshot: SecuritySnapshot, old_config: NamedConfig, new_config: NamedConfig
    ) -> None:
        self._check_type(old_config)
        self._check_type(new_config)
        self.check_name(self.kind, new_config.name)
        self.check_name(self.kind, old_config.name)
        capability = self.check_capability(self.kind, new_config.implementation_id)
        if not snapshot.has(self.kind, old_config.name):
            fail(self.not_found, old_config.name)
        if new_config.name != old_config.name:
            # a rename drops the old name, so it must be removable
            self.check_undeletable(snapshot, old_config)
            self.check_not_active(snapshot, old_config)
            if snapshot.has(self.kind, new_config.name):
                fail(self.already_exists, new_config.name)
        self.validate_fields(snapshot, new_config)
        self._run_implementation_rules(capability, snapshot, new_config)

    def validate_remove(self, snapshot: SecuritySnapshot, config: NamedConfig) -> None:
        self._check_type(config)
        self.check_name(self.kind, config.name)
        self.check_undeletable(snapshot, config)
        if not snapshot.has(self.kind, config.name):
            fail(self.not_found, config.name)
        self.check_not_active(snapshot, config)

    def validate_fields(self, snapshot: SecuritySnapshot, config: Any) -> None:
        pass

    def check_undeletable(self, snapshot: SecuritySnapshot, config: Any) -> None:
        pass

    def check_not_active(self, snapshot: SecuritySnapshot, config: Any) -> None:
        pass

    def _check_type(self, config: NamedConfig) -> None:
        expected = CONFIG_TYPES[self.kind]
        if not isinstance(config, expected):
            raise TypeError(f"Expected {expected.__name__}, got {type(config).__name__}")

    def _run_implementation_rules(
        self, capability: Capability, snapshot: SecuritySnapshot, config: NamedConfig
    ) -> None:
        for rule in capability.validators:
            rule(config, snapshot)
