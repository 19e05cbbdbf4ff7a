from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from string import Formatter
from typing import Any, Dict, Tuple


class ErrorKind(str, Enum):
    """Every way a security configuration change can be rejected."""

    NAME_REQUIRED = "NAME_REQUIRED"
    CLASSNAME_REQUIRED = "CLASSNAME_REQUIRED"
    CLASS_NOT_FOUND = "CLASS_NOT_FOUND"
    CLASS_WRONG_TYPE = "CLASS_WRONG_TYPE"

    USERGROUP_SERVICE_ALREADY_EXISTS = "USERGROUP_SERVICE_ALREADY_EXISTS"
    USERGROUP_SERVICE_NOT_FOUND = "USERGROUP_SERVICE_NOT_FOUND"
    USERGROUP_SERVICE_ACTIVE = "USERGROUP_SERVICE_ACTIVE"
    ROLE_SERVICE_ALREADY_EXISTS = "ROLE_SERVICE_ALREADY_EXISTS"
    ROLE_SERVICE_NOT_FOUND = "ROLE_SERVICE_NOT_FOUND"
    ROLE_SERVICE_ACTIVE = "ROLE_SERVICE_ACTIVE"
    PASSWD_POLICY_ALREADY_EXISTS = "PASSWD_POLICY_ALREADY_EXISTS"
    PASSWD_POLICY_NOT_FOUND = "PASSWD_POLICY_NOT_FOUND"
    PASSWD_POLICY_ACTIVE = "PASSWD_POLICY_ACTIVE"
    PASSWD_POLICY_MASTER_DELETE = "PASSWD_POLICY_MASTER_DELETE"
    AUTH_PROVIDER_ALREADY_EXISTS = "AUTH_PROVIDER_ALREADY_EXISTS"
    AUTH_PROVIDER_NOT_FOUND = "AUTH_PROVIDER_NOT_FOUND"
    AUTH_PROVIDER_ACTIVE = "AUTH_PROVIDER_ACTIVE"
    SECURITY_FILTER_ALREADY_EXISTS = "SECURITY_FILTER_ALREADY_EXISTS"
    SECURITY_FILTER_NOT_FOUND = "SECURITY_FILTER_NOT_FOUND"
    SECURITY_FILTER_ACTIVE = "SECURITY_FILTER_ACTIVE"

    INVALID_MIN_LENGTH = "INVALID_MIN_LENGTH"
    INVALID_MAX_LENGTH = "INVALID_MAX_LENGTH"
    PASSWD_ENCODER_REQUIRED = "PASSWD_ENCODER_REQUIRED"
    INVALID_CONFIG_PASSWORD_ENCODER = "INVALID_CONFIG_PASSWORD_ENCODER"
    INVALID_STRONG_PASSWORD_ENCODER = "INVALID_STRONG_PASSWORD_ENCODER"
    PASSWD_POLICY_REQUIRED = "PASSWD_POLICY_REQUIRED"
    RESERVED_ROLE_NAME = "RESERVED_ROLE_NAME"

    PASSWORD_ENCODER_REQUIRED = "PASSWORD_ENCODER_REQUIRED"
    INVALID_PASSWORD_ENCODER = "INVALID_PASSWORD_ENCODER"
    INVALID_STRONG_CONFIG_PASSWORD_ENCODER = "INVALID_STRONG_CONFIG_PASSWORD_ENCODER"

    @property
    def template(self) -> str:
        return MESSAGES[self]

    @property
    def arity(self) -> int:
        """Number of positional arguments the message template expects."""
        fields = {f for _, f, _, _ in Formatter().parse(self.template) if f is not None}
        return len(fields)


MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.NAME_REQUIRED: "Name is required",
    ErrorKind.CLASSNAME_REQUIRED: "Implementation is required",
    ErrorKind.CLASS_NOT_FOUND: "Implementation {0} not found",
    ErrorKind.CLASS_WRONG_TYPE: "Implementation {1} is not a valid {0}",
    ErrorKind.USERGROUP_SERVICE_ALREADY_EXISTS: "User/group service {0} already exists",
    ErrorKind.USERGROUP_SERVICE_NOT_FOUND: "User/group service {0} does not exist",
    ErrorKind.USERGROUP_SERVICE_ACTIVE: (
        "User/group service {0} is used by active authentication provider {1}"
    ),
    ErrorKind.ROLE_SERVICE_ALREADY_EXISTS: "Role service {0} already exists",
    ErrorKind.ROLE_SERVICE_NOT_FOUND: "Role service {0} does not exist",
    ErrorKind.ROLE_SERVICE_ACTIVE: "Role service {0} is the active role service",
    ErrorKind.PASSWD_POLICY_ALREADY_EXISTS: "Password policy {0} already exists",
    ErrorKind.PASSWD_POLICY_NOT_FOUND: "Password policy {0} does not exist",
    ErrorKind.PASSWD_POLICY_ACTIVE: "Password policy {0} is used by active user/group service {1}",
    ErrorKind.PASSWD_POLICY_MASTER_DELETE: "The master password policy cannot be removed",
    ErrorKind.AUTH_PROVIDER_ALREADY_EXISTS: "Authentication provider {0} already exists",
    ErrorKind.AUTH_PROVIDER_NOT_FOUND: "Authentication provider {0} does not exist",
    ErrorKind.AUTH_PROVIDER_ACTIVE: "Authentication provider {0} is active",
    ErrorKind.SECURITY_FILTER_ALREADY_EXISTS: "Security filter {0} already exists",
    ErrorKind.SECURITY_FILTER_NOT_FOUND: "Security filter {0} does not exist",
    ErrorKind.SECURITY_FILTER_ACTIVE: "Security filter {0} is used by filter chain {1}",
    ErrorKind.INVALID_MIN_LENGTH: "Minimum length must be >= 0",
    ErrorKind.INVALID_MAX_LENGTH: "Maximum length must be -1 (unlimited) or >= minimum length",
    ErrorKind.PASSWD_ENCODER_REQUIRED: "User/group service {0} requires a password encoder",
    ErrorKind.INVALID_CONFIG_PASSWORD_ENCODER: "Password encoder {0} does not exist",
    ErrorKind.INVALID_STRONG_PASSWORD_ENCODER: (
        "Strong password encoders require strong encryption, which is not available"
    ),
    ErrorKind.PASSWD_POLICY_REQUIRED: "User/group service {0} requires a password policy",
    ErrorKind.RESERVED_ROLE_NAME: "{0} is a reserved system role",
    ErrorKind.PASSWORD_ENCODER_REQUIRED: "A configuration password encrypter is required",
    ErrorKind.INVALID_PASSWORD_ENCODER: "{0} is not a valid configuration password encrypter",
    ErrorKind.INVALID_STRONG_CONFIG_PASSWORD_ENCODER: (
        "Strong configuration password encrypters require strong encryption, "
        "which is not available"
    ),
}


def _render_argument(value: Any) -> Any:
    # ServiceKind and other enums render by value
    return getattr(value, "value", value)


@dataclass(frozen=True)
class ValidationIssue:
    """Tagged validation outcome: an error kind plus ordered substitution arguments."""

    kind: ErrorKind
    arguments: Tuple[Any, ...] = ()

    @property
    def message(self) -> str:
        try:
            return self.kind.template.format(*(_render_argument(a) for a in self.arguments))
        except IndexError:
            return f"{self.kind.template} {self.arguments!r}"

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "error": self.kind.value,
            "arguments": [_render_argument(a) for a in self.arguments],
            "message": self.message,
        }
