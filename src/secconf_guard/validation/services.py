from __future__ import annotations

from typing import ClassVar, Optional

from secconf_guard.issues import ErrorKind
from secconf_guard.model import (
    AuthProviderConfig,
    PasswordPolicyConfig,
    RoleServiceConfig,
    SecurityFilterConfig,
    ServiceKind,
    UserGroupServiceConfig,
)
from secconf_guard.snapshot import SecuritySnapshot
from secconf_guard.utils import _is_blank

from .base import NamedServiceValidator, fail


class PasswordPolicyValidator(NamedServiceValidator):
    kind: ClassVar[ServiceKind] = ServiceKind.PASSWORD_POLICY

    def validate_fields(self, snapshot: SecuritySnapshot, config: PasswordPolicyConfig) -> None:
        if config.min_length < 0:
            fail(ErrorKind.INVALID_MIN_LENGTH)
        if config.max_length != -1 and config.max_length < config.min_length:
            fail(ErrorKind.INVALID_MAX_LENGTH)

    def check_undeletable(self, snapshot: SecuritySnapshot, config: PasswordPolicyConfig) -> None:
        # the master policy protects the store's own secrets, active or not
        if config.name == snapshot.master_policy_name:
            fail(ErrorKind.PASSWD_POLICY_MASTER_DELETE)

    def check_not_active(self, snapshot: SecuritySnapshot, config: PasswordPolicyConfig) -> None:
        service = snapshot.active_password_policies().get(str(config.name))
        if service is not None:
            fail(ErrorKind.PASSWD_POLICY_ACTIVE, config.name, service)


class UserGroupServiceValidator(NamedServiceValidator):
    kind: ClassVar[ServiceKind] = ServiceKind.USER_GROUP_SERVICE

    def validate_fields(self, snapshot: SecuritySnapshot, config: UserGroupServiceConfig) -> None:
        encoder_name = config.password_encoder_name
        if encoder_name is None or _is_blank(encoder_name):
            fail(ErrorKind.PASSWD_ENCODER_REQUIRED, config.name)
        encoder = self.lookup_encoder(encoder_name)
        if not encoder.exists:
            fail(ErrorKind.INVALID_CONFIG_PASSWORD_ENCODER, encoder_name)
        if self.rejects_strong(encoder):
            fail(ErrorKind.INVALID_STRONG_PASSWORD_ENCODER)

        policy_name = config.password_policy_name
        if _is_blank(policy_name):
            fail(ErrorKind.PASSWD_POLICY_REQUIRED, config.name)
        if not snapshot.has(ServiceKind.PASSWORD_POLICY, policy_name):
            fail(ErrorKind.PASSWD_POLICY_NOT_FOUND, policy_name)

    def check_not_active(self, snapshot: SecuritySnapshot, config: UserGroupServiceConfig) -> None:
        provider = snapshot.active_user_group_services().get(str(config.name))
        if provider is not None:
            fail(ErrorKind.USERGROUP_SERVICE_ACTIVE, config.name, provider)


class RoleServiceValidator(NamedServiceValidator):
    kind: ClassVar[ServiceKind] = ServiceKind.ROLE_SERVICE

    def validate_fields(self, snapshot: SecuritySnapshot, config: RoleServiceConfig) -> None:
        # both fields are checked, group admin first
        self._check_role(snapshot, config.group_admin_role_name)
        self._check_role(snapshot, config.admin_role_name)

    @staticmethod
    def _check_role(snapshot: SecuritySnapshot, role_name: Optional[str]) -> None:
        if role_name and role_name in snapshot.reserved_role_names:
            fail(ErrorKind.RESERVED_ROLE_NAME, role_name)

    def check_not_active(self, snapshot: SecuritySnapshot, config: RoleServiceConfig) -> None:
        if config.name == snapshot.manager_config.role_service_name:
            fail(ErrorKind.ROLE_SERVICE_ACTIVE, config.name)


class AuthProviderValidator(NamedServiceValidator):
    kind: ClassVar[ServiceKind] = ServiceKind.AUTH_PROVIDER

    def validate_fields(self, snapshot: SecuritySnapshot, config: AuthProviderConfig) -> None:
        if not snapshot.has(ServiceKind.USER_GROUP_SERVICE, config.user_group_service_name):
            fail(ErrorKind.USERGROUP_SERVICE_NOT_FOUND, config.user_group_service_name)

    def check_not_active(self, snapshot: SecuritySnapshot, config: AuthProviderConfig) -> None:
        if config.name in snapshot.manager_config.auth_provider_names:
            fail(ErrorKind.AUTH_PROVIDER_ACTIVE, config.name)


class SecurityFilterValidator(NamedServiceValidator):
    kind: ClassVar[ServiceKind] = ServiceKind.SECURITY_FILTER

    def check_not_active(self, snapshot: SecuritySnapshot, config: SecurityFilterConfig) -> None:
        chain = snapshot.filter_chain_using(str(config.name))
        if chain is not None:
            fail(ErrorKind.SECURITY_FILTER_ACTIVE, config.name, chain)
