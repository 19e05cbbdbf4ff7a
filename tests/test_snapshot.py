from types import MappingProxyType

import pytest

from secconf_guard.capabilities import PASSWORD_VALIDATOR, USERNAME_PASSWORD_PROVIDER
from secconf_guard.exceptions import ConfigDuplicateError
from secconf_guard.model import (
    AuthProviderConfig,
    ManagerConfig,
    PasswordPolicyConfig,
    RoleServiceConfig,
    ServiceKind,
    UserGroupServiceConfig,
    config_from_mapping,
    configs_from_mappings,
)
from secconf_guard.snapshot import SecuritySnapshot


def test_build_rejects_duplicate_names():
    with pytest.raises(ConfigDuplicateError):
        SecuritySnapshot.build([RoleServiceConfig("r"), RoleServiceConfig("r")])


def test_same_name_in_different_kinds_is_allowed():
    snapshot = SecuritySnapshot.build([RoleServiceConfig("x"), PasswordPolicyConfig("x")])
    assert snapshot.has(ServiceKind.ROLE_SERVICE, "x")
    assert snapshot.has(ServiceKind.PASSWORD_POLICY, "x")
    assert not snapshot.has(ServiceKind.AUTH_PROVIDER, "x")
    assert not snapshot.has(ServiceKind.AUTH_PROVIDER, None)


def test_snapshot_is_read_only(snapshot):
    assert isinstance(snapshot.configs[ServiceKind.ROLE_SERVICE], MappingProxyType)
    with pytest.raises(TypeError):
        snapshot.configs[ServiceKind.ROLE_SERVICE]["new"] = RoleServiceConfig("new")
    with pytest.raises(TypeError):
        snapshot.manager_config.filter_chain["api"] = ("basic",)


def test_active_services(snapshot):
    assert [p.name for p in snapshot.active_auth_providers()] == ["default-auth"]
    assert snapshot.active_user_group_services() == {"default": "default-auth"}
    assert snapshot.active_password_policies() == {"default": "default"}
    assert snapshot.filter_chain_using("anonymous") == "web"
    assert snapshot.filter_chain_using("form") is None


def test_unknown_active_provider_is_ignored(base_configs):
    manager = ManagerConfig(auth_provider_names=("missing", "default-auth"))
    snapshot = SecuritySnapshot.build(base_configs, manager)
    assert [p.name for p in snapshot.active_auth_providers()] == ["default-auth"]


def test_first_active_provider_is_reported(base_configs):
    configs = base_configs + [
        AuthProviderConfig("second", USERNAME_PASSWORD_PROVIDER, "default"),
    ]
    manager = ManagerConfig(auth_provider_names=("second", "default-auth", "second"))
    snapshot = SecuritySnapshot.build(configs, manager)
    assert manager.auth_provider_names == ("second", "default-auth")
    assert snapshot.active_user_group_services() == {"default": "second"}


def test_derivations_return_new_snapshots(snapshot):
    policy = PasswordPolicyConfig("p2", PASSWORD_VALIDATOR)
    added = snapshot.with_config(policy)
    assert added.get(ServiceKind.PASSWORD_POLICY, "p2") is policy
    assert not snapshot.has(ServiceKind.PASSWORD_POLICY, "p2")

    renamed = added.with_config(PasswordPolicyConfig("p3"), previous_name="p2")
    assert renamed.names(ServiceKind.PASSWORD_POLICY) == ("default", "master", "p3")

    removed = renamed.without_config(ServiceKind.PASSWORD_POLICY, "p3")
    assert removed.names(ServiceKind.PASSWORD_POLICY) == ("default", "master")

    manager = removed.with_manager_config(ManagerConfig())
    assert manager.manager_config == ManagerConfig()
    assert removed.manager_config == snapshot.manager_config


def test_config_mapping_round_trip(base_configs):
    mappings = [c.to_mapping() for c in base_configs]
    assert list(configs_from_mappings(mappings)) == base_configs


def test_config_from_mapping_errors():
    with pytest.raises(ValueError):
        config_from_mapping({"name": "x"})
    with pytest.raises(ValueError):
        config_from_mapping({"kind": "SOMETHING", "name": "x"})
    with pytest.raises(ValueError):
        config_from_mapping({"kind": "ROLE_SERVICE", "name": "x", "colour": "red"})


def test_user_group_service_mapping_carries_kind():
    config = UserGroupServiceConfig("ug", "xml.user_group_service", "pbe", "default")
    assert config.to_mapping()["kind"] == "USER_GROUP_SERVICE"


def test_manager_config_mapping(manager_config):
    data = manager_config.to_mapping()
    assert data["filter_chain"] == {"web": ["basic", "anonymous"]}
    assert ManagerConfig.from_mapping(data) == manager_config
    assert ManagerConfig.from_mapping({}) == ManagerConfig()
