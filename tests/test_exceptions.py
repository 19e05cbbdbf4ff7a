from secconf_guard.exceptions import (
    ConfigDuplicateError,
    ConfigNotFoundError,
    ConfigPersistenceError,
    SecurityConfigError,
    SecurityConfigValidationError,
)
from secconf_guard.issues import ErrorKind, ValidationIssue
from secconf_guard.model import ServiceKind


def test_validation_error_message_and_attrs():
    err = SecurityConfigValidationError(ValidationIssue(ErrorKind.ROLE_SERVICE_ACTIVE, ("roles",)))
    assert str(err) == "ROLE_SERVICE_ACTIVE: Role service roles is the active role service"
    assert err.kind is ErrorKind.ROLE_SERVICE_ACTIVE
    assert err.arguments == ("roles",)
    assert err.to_dict() == {
        "error": "ROLE_SERVICE_ACTIVE",
        "arguments": ["roles"],
        "message": "Role service roles is the active role service",
    }


def test_enum_arguments_render_by_value():
    issue = ValidationIssue(ErrorKind.CLASS_WRONG_TYPE, (ServiceKind.AUTH_PROVIDER, "x.y"))
    assert issue.message == "Implementation x.y is not a valid AUTH_PROVIDER"
    assert issue.arguments[0] is ServiceKind.AUTH_PROVIDER


def test_message_with_missing_arguments_does_not_raise():
    issue = ValidationIssue(ErrorKind.PASSWD_POLICY_ACTIVE, ("p",))
    assert "('p',)" in issue.message


def test_custom_exceptions_are_subclasses():
    assert issubclass(SecurityConfigValidationError, SecurityConfigError)
    assert issubclass(ConfigNotFoundError, SecurityConfigError)
    assert issubclass(ConfigDuplicateError, SecurityConfigError)
    assert issubclass(ConfigPersistenceError, SecurityConfigError)
