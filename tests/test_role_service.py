from dataclasses import replace

import pytest

from secconf_guard.capabilities import MEMORY_ROLE_SERVICE, XML_ROLE_SERVICE
from secconf_guard.exceptions import SecurityConfigValidationError
from secconf_guard.issues import ErrorKind
from secconf_guard.model import RoleServiceConfig
from secconf_guard.settings import ADMIN_ROLE, SYSTEM_ROLES
from secconf_guard.snapshot import SecuritySnapshot


@pytest.fixture
def config():
    return RoleServiceConfig("abcd", MEMORY_ROLE_SERVICE, admin_role_name="ADMIN")


def test_remove_without_name_fails(validator, snapshot, config):
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_remove_role_service(snapshot, replace(config, name=None))
    assert exc.value.kind is ErrorKind.NAME_REQUIRED
    assert exc.value.arguments == ()


@pytest.mark.parametrize("role", SYSTEM_ROLES)
def test_reserved_admin_role_name_fails(validator, snapshot, config, role):
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_add_role_service(snapshot, replace(config, admin_role_name=role))
    assert exc.value.kind is ErrorKind.RESERVED_ROLE_NAME
    assert exc.value.arguments == (role,)


@pytest.mark.parametrize("role", SYSTEM_ROLES)
def test_reserved_group_admin_role_name_fails(validator, snapshot, config, role):
    config = replace(config, group_admin_role_name=role)
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_add_role_service(snapshot, config)
    assert exc.value.kind is ErrorKind.RESERVED_ROLE_NAME
    assert exc.value.arguments == (role,)


def test_both_role_fields_are_checked(validator, snapshot, config):
    # a clean group admin role must not hide a reserved admin role
    config = replace(config, admin_role_name=ADMIN_ROLE, group_admin_role_name="GROUP_ADMIN")
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_add_role_service(snapshot, config)
    assert exc.value.arguments == (ADMIN_ROLE,)


def test_reserved_roles_come_from_snapshot(validator, base_configs, config):
    snapshot = SecuritySnapshot.build(base_configs, reserved_role_names={"ADMIN"})
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_add_role_service(snapshot, config)
    assert exc.value.kind is ErrorKind.RESERVED_ROLE_NAME
    assert exc.value.arguments == ("ADMIN",)


def test_role_service_without_admin_roles_passes(validator, snapshot):
    validator.validate_add_role_service(snapshot, RoleServiceConfig("plain", XML_ROLE_SERVICE))


def test_add_existing_role_service_checked_before_roles(validator, snapshot, config):
    config = replace(config, name="default-role-service", admin_role_name=ADMIN_ROLE)
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_add_role_service(snapshot, config)
    assert exc.value.kind is ErrorKind.ROLE_SERVICE_ALREADY_EXISTS
    assert exc.value.arguments == ("default-role-service",)


def test_modify_unknown_role_service_fails(validator, snapshot, config):
    config = replace(config, name="default2", admin_role_name=ADMIN_ROLE)
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_modified_role_service(snapshot, config, config)
    assert exc.value.kind is ErrorKind.ROLE_SERVICE_NOT_FOUND
    assert exc.value.arguments == ("default2",)


def test_remove_active_role_service_fails(validator, snapshot, config):
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_remove_role_service(
            snapshot, replace(config, name="default-role-service")
        )
    assert exc.value.kind is ErrorKind.ROLE_SERVICE_ACTIVE
    assert exc.value.arguments == ("default-role-service",)


def test_remove_inactive_role_service_passes(validator, snapshot):
    other = snapshot.get(RoleServiceConfig.kind, "other-roles")
    validator.validate_remove_role_service(snapshot, other)
