# python
import logging

from secconf_guard import (
    AuthProviderConfig,
    ManagerConfig,
    PasswordPolicyConfig,
    RoleServiceConfig,
    SecurityConfigStore,
    SecurityConfigValidationError,
    UserGroupServiceConfig,
)
from secconf_guard.capabilities import (
    PASSWORD_VALIDATOR,
    USERNAME_PASSWORD_PROVIDER,
    XML_ROLE_SERVICE,
    XML_USER_GROUP_SERVICE,
)
from secconf_guard.history import History

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    store = SecurityConfigStore(history=History())
    store.add(PasswordPolicyConfig("master", PASSWORD_VALIDATOR, min_length=8))
    store.add(PasswordPolicyConfig("default", PASSWORD_VALIDATOR))
    store.add(UserGroupServiceConfig("default", XML_USER_GROUP_SERVICE, "pbe", "default"))
    store.add(RoleServiceConfig("default", XML_ROLE_SERVICE, admin_role_name="ADMIN"))
    store.add(AuthProviderConfig("default", USERNAME_PASSWORD_PROVIDER, "default"))
    store.update_manager_config(
        ManagerConfig(
            role_service_name="default",
            config_password_encrypter_name="pbe",
            auth_provider_names=("default",),
        ),
        reason="Initial security setup",
    )

    def on_change(snapshot):
        print("Active providers:", [p.name for p in snapshot.active_auth_providers()])

    store.register_post_update_hook(on_change)

    try:
        store.remove(UserGroupServiceConfig("default"))
    except SecurityConfigValidationError as exc:
        print("Rejected:", exc.to_dict())

    print("Last change:", store.history.last_change)
