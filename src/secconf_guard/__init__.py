"""
secconf_guard: validation gate for pluggable security service configurations.

- Validates additions, modifications and removals of user/group services, role
  services, password policies, authentication providers and security filters.
- Validates the singleton manager configuration that names the active services.
- Fails fast with a tagged error kind and ordered message arguments.
- Ships an in-memory store that serializes validate-then-write under one lock.
"""

from __future__ import annotations

from secconf_guard.capabilities import Capability, CapabilityRegistry, default_capability_registry
from secconf_guard.encoders import (
    EncoderDescriptor,
    EncoderRegistry,
    default_encoder_registry,
    is_strong_encryption_available,
)
from secconf_guard.exceptions import (
    ConfigDuplicateError,
    ConfigNotFoundError,
    ConfigPersistenceError,
    SecurityConfigError,
    SecurityConfigValidationError,
)
from secconf_guard.history import History
from secconf_guard.issues import ErrorKind, ValidationIssue
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
from secconf_guard.settings import SYSTEM_ROLES, ValidatorSettings
from secconf_guard.snapshot import SecuritySnapshot
from secconf_guard.store import JsonFileAdapter, PersistanceAdapterProtocol, SecurityConfigStore
from secconf_guard.validation import ValidatorProtocol
from secconf_guard.validator import Operation, SecurityConfigValidator

__all__ = [
    "SecurityConfigValidator",
    "Operation",
    "SecurityConfigStore",
    "SecuritySnapshot",
    "ValidatorSettings",
    "SYSTEM_ROLES",
    "ServiceKind",
    "NamedConfig",
    "PasswordPolicyConfig",
    "UserGroupServiceConfig",
    "RoleServiceConfig",
    "AuthProviderConfig",
    "SecurityFilterConfig",
    "ManagerConfig",
    "Capability",
    "CapabilityRegistry",
    "default_capability_registry",
    "EncoderDescriptor",
    "EncoderRegistry",
    "default_encoder_registry",
    "is_strong_encryption_available",
    "ErrorKind",
    "ValidationIssue",
    "SecurityConfigError",
    "SecurityConfigValidationError",
    "ConfigNotFoundError",
    "ConfigDuplicateError",
    "ConfigPersistenceError",
    "History",
    "JsonFileAdapter",
    "PersistanceAdapterProtocol",
    "ValidatorProtocol",
]
