# python
import pytest

from secconf_guard.capabilities import (
    ANONYMOUS_FILTER,
    BASIC_AUTH_FILTER,
    FORM_LOGIN_FILTER,
    MEMORY_ROLE_SERVICE,
    PASSWORD_VALIDATOR,
    USERNAME_PASSWORD_PROVIDER,
    XML_ROLE_SERVICE,
    XML_USER_GROUP_SERVICE,
    Capability,
    default_capability_registry,
)
from secconf_guard.model import (
    AuthProviderConfig,
    ManagerConfig,
    PasswordPolicyConfig,
    RoleServiceConfig,
    SecurityFilterConfig,
    UserGroupServiceConfig,
)
from secconf_guard.snapshot import SecuritySnapshot
from secconf_guard.validator import SecurityConfigValidator

# resolvable, but not a security service of any kind
NOT_A_SERVICE = "builtins.str"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("SECCONF_STRONG_ENCRYPTION", raising=False)
    monkeypatch.delenv("SECCONF_MASTER_POLICY", raising=False)


@pytest.fixture
def base_configs():
    return [
        PasswordPolicyConfig("default", PASSWORD_VALIDATOR, min_length=0, max_length=-1),
        PasswordPolicyConfig("master", PASSWORD_VALIDATOR, min_length=8, max_length=-1),
        UserGroupServiceConfig(
            "default",
            XML_USER_GROUP_SERVICE,
            password_encoder_name="pbe",
            password_policy_name="default",
        ),
        RoleServiceConfig(
            "default-role-service",
            XML_ROLE_SERVICE,
            admin_role_name="ADMIN",
            group_admin_role_name="GROUP_ADMIN",
        ),
        RoleServiceConfig("other-roles", MEMORY_ROLE_SERVICE),
        AuthProviderConfig("default-auth", USERNAME_PASSWORD_PROVIDER, "default"),
        SecurityFilterConfig("basic", BASIC_AUTH_FILTER),
        SecurityFilterConfig("anonymous", ANONYMOUS_FILTER),
        SecurityFilterConfig("form", FORM_LOGIN_FILTER),
    ]


@pytest.fixture
def manager_config():
    return ManagerConfig(
        role_service_name="default-role-service",
        config_password_encrypter_name="pbe",
        auth_provider_names=("default-auth",),
        filter_chain={"web": ("basic", "anonymous")},
    )


@pytest.fixture
def snapshot(base_configs, manager_config):
    return SecuritySnapshot.build(base_configs, manager_config)


@pytest.fixture
def capabilities():
    registry = default_capability_registry()
    registry.register(Capability(NOT_A_SERVICE, frozenset()))
    return registry


@pytest.fixture
def validator(capabilities):
    return SecurityConfigValidator(capabilities, strong_encryption_available=False)


@pytest.fixture
def strong_validator(capabilities):
    return SecurityConfigValidator(capabilities, strong_encryption_available=True)
