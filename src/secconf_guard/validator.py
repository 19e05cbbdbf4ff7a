"""
Facade over the per-kind rule chains.

Every entry point takes the current ``SecuritySnapshot`` explicitly and either
returns ``None`` (the change is valid) or raises ``SecurityConfigValidationError``
for the first rule that fails. ``check`` runs the same chain but returns the
``ValidationIssue`` instead of raising.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Optional

from secconf_guard.capabilities import (
    Capability,
    CapabilityRegistry,
    default_capability_registry,
)
from secconf_guard.encoders import (
    EncoderRegistry,
    default_encoder_registry,
    is_strong_encryption_available,
)
from secconf_guard.exceptions import SecurityConfigValidationError
from secconf_guard.issues import ValidationIssue
from secconf_guard.model import (
    AuthProviderConfig,
    ManagerConfig,
    NamedConfig,
    PasswordPolicyConfig,
    RoleServiceConfig,
    SecurityFilterConfig,
    ServiceKind,
    UserGroupServiceConfig,
)
from secconf_guard.snapshot import SecuritySnapshot
from secconf_guard.validation import (
    AuthProviderValidator,
    ManagerConfigValidator,
    NamedServiceValidator,
    PasswordPolicyValidator,
    RoleServiceValidator,
    SecurityFilterValidator,
    UserGroupServiceValidator,
)

logger = logging.getLogger("secconf_guard.validator")
logger.addHandler(logging.NullHandler())


class Operation(str, Enum):
    ADD = "add"
    MODIFY = "modify"
    REMOVE = "remove"
    MANAGER = "manager"


class SecurityConfigValidator:
    def __init__(
        self,
        capabilities: Optional[CapabilityRegistry] = None,
        encoders: Optional[EncoderRegistry] = None,
        *,
        strong_encryption_available: Optional[bool] = None,
    ) -> None:
        self.capabilities = capabilities or default_capability_registry()
        self.encoders = encoders or default_encoder_registry()
        if strong_encryption_available is None:
            strong_encryption_available = is_strong_encryption_available()
        self.strong_encryption_available = strong_encryption_available

        shared = (self.capabilities, self.encoders, strong_encryption_available)
        self._services: Dict[ServiceKind, NamedServiceValidator] = {
            ServiceKind.PASSWORD_POLICY: PasswordPolicyValidator(*shared),
            ServiceKind.USER_GROUP_SERVICE: UserGroupServiceValidator(*shared),
            ServiceKind.ROLE_SERVICE: RoleServiceValidator(*shared),
            ServiceKind.AUTH_PROVIDER: AuthProviderValidator(*shared),
            ServiceKind.SECURITY_FILTER: SecurityFilterValidator(*shared),
        }
        self._manager = ManagerConfigValidator(*shared)
        logger.debug(
            "SecurityConfigValidator init strong_encryption_available=%s",
            strong_encryption_available,
        )

    def validator_for(self, kind: ServiceKind) -> NamedServiceValidator:
        return self._services[kind]

    # shared checks

    def check_capability(
        self, required_kind: ServiceKind, implementation_id: Optional[str]
    ) -> Capability:
        return self._manager.check_capability(required_kind, implementation_id)

    def check_name(self, required_kind: ServiceKind, name: Optional[str]) -> None:
        self._manager.check_name(required_kind, name)

    # kind dispatch

    def validate_add(self, snapshot: SecuritySnapshot, config: NamedConfig) -> None:
        self.validator_for(config.kind).validate_add(snapshot, config)

    def validate_modified(
        self, snapshot: SecuritySnapshot, old_config: NamedConfig, new_config: NamedConfig
    ) -> None:
        if old_config.kind is not new_config.kind:
            raise TypeError(
                f"Cannot modify a {old_config.kind.value} into a {new_config.kind.value}"
            )
        self.validator_for(new_config.kind).validate_modified(snapshot, old_config, new_config)

    def validate_remove(self, snapshot: SecuritySnapshot, config: NamedConfig) -> None:
        self.validator_for(config.kind).validate_remove(snapshot, config)

    def validate_manager_config(self, snapshot: SecuritySnapshot, config: ManagerConfig) -> None:
        self._manager.validate(snapshot, config)

    def check(
        self, operation: Operation, snapshot: SecuritySnapshot, *configs: object
    ) -> Optional[ValidationIssue]:
        """Run ``operation`` and return the first issue found, or ``None`` when valid."""
        handlers = {
            Operation.ADD: self.validate_add,
            Operation.MODIFY: self.validate_modified,
            Operation.REMOVE: self.validate_remove,
            Operation.MANAGER: self.validate_manager_config,
        }
        try:
            handlers[Operation(operation)](snapshot, *configs)  # type: ignore[operator]
        except SecurityConfigValidationError as exc:
            return exc.issue
        return None

    # password policies

    def validate_add_password_policy(
        self, snapshot: SecuritySnapshot, config: PasswordPolicyConfig
    ) -> None:
        self._services[ServiceKind.PASSWORD_POLICY].validate_add(snapshot, config)

    def validate_modified_password_policy(
        self,
        snapshot: SecuritySnapshot,
        old_config: PasswordPolicyConfig,
        new_config: PasswordPolicyConfig,
    ) -> None:
        self._services[ServiceKind.PASSWORD_POLICY].validate_modified(
            snapshot, old_config, new_config
        )

    def validate_remove_password_policy(
        self, snapshot: SecuritySnapshot, config: PasswordPolicyConfig
    ) -> None:
        self._services[ServiceKind.PASSWORD_POLICY].validate_remove(snapshot, config)

    # user/group services

    def validate_add_user_group_service(
        self, snapshot: SecuritySnapshot, config: UserGroupServiceConfig
    ) -> None:
        self._services[ServiceKind.USER_GROUP_SERVICE].validate_add(snapshot, config)

    def validate_modified_user_group_service(
        self,
        snapshot: SecuritySnapshot,
        old_config: UserGroupServiceConfig,
        new_config: UserGroupServiceConfig,
    ) -> None:
        self._services[ServiceKind.USER_GROUP_SERVICE].validate_modified(
            snapshot, old_config, new_config
        )

    def validate_remove_user_group_service(
        self, snapshot: SecuritySnapshot, config: UserGroupServiceConfig
    ) -> None:
        self._services[ServiceKind.USER_GROUP_SERVICE].validate_remove(snapshot, config)

    # role services

    def validate_add_role_service(
        self, snapshot: SecuritySnapshot, config: RoleServiceConfig
    ) -> None:
        self._services[ServiceKind.ROLE_SERVICE].validate_add(snapshot, config)

    def validate_modified_role_service(
        self,
        snapshot: SecuritySnapshot,
        old_config: RoleServiceConfig,
        new_config: RoleServiceConfig,
    ) -> None:
        self._services[ServiceKind.ROLE_SERVICE].validate_modified(
            snapshot, old_config, new_config
        )

    def validate_remove_role_service(
        self, snapshot: SecuritySnapshot, config: RoleServiceConfig
    ) -> None:
        self._services[ServiceKind.ROLE_SERVICE].validate_remove(snapshot, config)

    # authentication providers

    def validate_add_auth_provider(
        self, snapshot: SecuritySnapshot, config: AuthProviderConfig
    ) -> None:
        self._services[ServiceKind.AUTH_PROVIDER].validate_add(snapshot, config)

    def validate_modified_auth_provider(
        self,
        snapshot: SecuritySnapshot,
        old_config: AuthProviderConfig,
        new_config: AuthProviderConfig,
    ) -> None:
        self._services[ServiceKind.AUTH_PROVIDER].validate_modified(
            snapshot, old_config, new_config
        )

    def validate_remove_auth_provider(
        self, snapshot: SecuritySnapshot, config: AuthProviderConfig
    ) -> None:
        self._services[ServiceKind.AUTH_PROVIDER].validate_remove(snapshot, config)

    # security filters

    def validate_add_filter(self, snapshot: SecuritySnapshot, config: SecurityFilterConfig) -> None:
        self._services[ServiceKind.SECURITY_FILTER].validate_add(snapshot, config)

    def validate_modified_filter(
        self,
        snapshot: SecuritySnapshot,
        old_config: SecurityFilterConfig,
        new_config: SecurityFilterConfig,
    ) -> None:
        self._services[ServiceKind.SECURITY_FILTER].validate_modified(
            snapshot, old_config, new_config
        )

    def validate_remove_filter(
        self, snapshot: SecuritySnapshot, config: SecurityFilterConfig
    ) -> None:
        self._services[ServiceKind.SECURITY_FILTER].validate_remove(snapshot, config)
