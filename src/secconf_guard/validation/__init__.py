from __future__ import annotations

from .base import BaseSecurityValidator, NamedServiceValidator, fail
from .manager import ManagerConfigValidator
from .protocol import ValidatorProtocol
from .services import (
    AuthProviderValidator,
    PasswordPolicyValidator,
    RoleServiceValidator,
    SecurityFilterValidator,
    UserGroupServiceValidator,
)

__all__ = [
    "BaseSecurityValidator",
    "NamedServiceValidator",
    "ManagerConfigValidator",
    "PasswordPolicyValidator",
    "UserGroupServiceValidator",
    "RoleServiceValidator",
    "AuthProviderValidator",
    "SecurityFilterValidator",
    "ValidatorProtocol",
    "fail",
]
