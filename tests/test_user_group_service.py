from dataclasses import replace

import pytest

from secconf_guard.capabilities import MEMORY_USER_GROUP_SERVICE
from secconf_guard.exceptions import SecurityConfigValidationError
from secconf_guard.issues import ErrorKind
from secconf_guard.model import ManagerConfig, UserGroupServiceConfig
from secconf_guard.snapshot import SecuritySnapshot


@pytest.fixture
def config():
    return UserGroupServiceConfig(
        "default2",
        MEMORY_USER_GROUP_SERVICE,
        password_encoder_name="plain",
        password_policy_name="default",
    )


def test_valid_user_group_service_passes(validator, snapshot, config):
    validator.validate_add_user_group_service(snapshot, config)


@pytest.mark.parametrize("name", ["default2", "other"])
def test_unknown_password_encoder_fails(validator, snapshot, config, name):
    config = replace(config, name=name, password_encoder_name="xxx")
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_add_user_group_service(snapshot, config)
    assert exc.value.kind is ErrorKind.INVALID_CONFIG_PASSWORD_ENCODER
    assert exc.value.arguments == ("xxx",)


def test_strong_encoder_without_strong_encryption_fails(validator, snapshot, config):
    config = replace(config, password_encoder_name="strongPbe")
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_add_user_group_service(snapshot, config)
    assert exc.value.kind is ErrorKind.INVALID_STRONG_PASSWORD_ENCODER


def test_strong_encoder_with_strong_encryption_passes(strong_validator, snapshot, config):
    config = replace(config, password_encoder_name="strongPbe")
    strong_validator.validate_add_user_group_service(snapshot, config)


@pytest.mark.parametrize("name, encoder", [("default2", ""), ("default3", None)])
def test_missing_password_encoder_fails(validator, snapshot, config, name, encoder):
    config = replace(config, name=name, password_encoder_name=encoder)
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_add_user_group_service(snapshot, config)
    assert exc.value.kind is ErrorKind.PASSWD_ENCODER_REQUIRED
    assert exc.value.arguments == (name,)


@pytest.mark.parametrize("name", ["default2", "default3"])
def test_unknown_password_policy_fails(validator, snapshot, config, name):
    config = replace(config, name=name, password_policy_name="default2")
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_add_user_group_service(snapshot, config)
    assert exc.value.kind is ErrorKind.PASSWD_POLICY_NOT_FOUND
    assert exc.value.arguments == ("default2",)


@pytest.mark.parametrize("name, policy", [("default2", ""), ("default3", None)])
def test_missing_password_policy_fails(validator, snapshot, config, name, policy):
    config = replace(config, name=name, password_policy_name=policy)
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_add_user_group_service(snapshot, config)
    assert exc.value.kind is ErrorKind.PASSWD_POLICY_REQUIRED
    assert exc.value.arguments == (name,)


def test_encoder_rules_run_before_policy_rules(validator, snapshot, config):
    config = replace(config, password_encoder_name="xxx", password_policy_name=None)
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_add_user_group_service(snapshot, config)
    assert exc.value.kind is ErrorKind.INVALID_CONFIG_PASSWORD_ENCODER


def test_modified_service_reruns_field_rules(validator, snapshot):
    old = snapshot.get(UserGroupServiceConfig.kind, "default")
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_modified_user_group_service(
            snapshot, old, replace(old, password_policy_name="nope")
        )
    assert exc.value.kind is ErrorKind.PASSWD_POLICY_NOT_FOUND
    assert exc.value.arguments == ("nope",)


def test_remove_without_name_fails(validator, snapshot, config):
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_remove_user_group_service(snapshot, replace(config, name=None))
    assert exc.value.kind is ErrorKind.NAME_REQUIRED
    assert exc.value.arguments == ()


def test_remove_active_service_names_referencing_provider(validator, snapshot, config):
    with pytest.raises(SecurityConfigValidationError) as exc:
        validator.validate_remove_user_group_service(snapshot, replace(config, name="default"))
    assert exc.value.kind is ErrorKind.USERGROUP_SERVICE_ACTIVE
    assert exc.value.arguments == ("default", "default-auth")


def test_remove_service_used_only_by_inactive_provider_passes(validator, base_configs):
    snapshot = SecuritySnapshot.build(
        base_configs, ManagerConfig(role_service_name="default-role-service")
    )
    service = snapshot.get(UserGroupServiceConfig.kind, "default")
    validator.validate_remove_user_group_service(snapshot, service)
