from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from secconf_guard.exceptions import ConfigDuplicateError
from secconf_guard.model import (
    AuthProviderConfig,
    ManagerConfig,
    NamedConfig,
    ServiceKind,
    UserGroupServiceConfig,
)
from secconf_guard.settings import DEFAULT_MASTER_POLICY_NAME, SYSTEM_ROLES
from secconf_guard.utils import _frozen_mapping


@dataclass(frozen=True)
class SecuritySnapshot:
    """Read-only view of every named config plus the manager config.

    Validation is a pure function of a snapshot and a proposed change, so a
    snapshot never changes once built; ``with_config`` and friends return new ones.
    """

    configs: Mapping[ServiceKind, Mapping[str, NamedConfig]] = field(default_factory=dict)
    manager_config: ManagerConfig = field(default_factory=ManagerConfig)
    master_policy_name: str = DEFAULT_MASTER_POLICY_NAME
    reserved_role_names: FrozenSet[str] = field(default_factory=lambda: frozenset(SYSTEM_ROLES))

    def __post_init__(self) -> None:
        frozen = {
            kind: _frozen_mapping(self.configs.get(kind, {})) for kind in ServiceKind
        }
        object.__setattr__(self, "configs", _frozen_mapping(frozen))
        object.__setattr__(self, "reserved_role_names", frozenset(self.reserved_role_names))

    @classmethod
    def build(
        cls,
        configs: Iterable[NamedConfig] = (),
        manager_config: Optional[ManagerConfig] = None,
        *,
        master_policy_name: str = DEFAULT_MASTER_POLICY_NAME,
        reserved_role_names: Iterable[str] = SYSTEM_ROLES,
    ) -> "SecuritySnapshot":
        grouped: Dict[ServiceKind, Dict[str, NamedConfig]] = {kind: {} for kind in ServiceKind}
        for config in configs:
            by_name = grouped[config.kind]
            if config.name in by_name:
                raise ConfigDuplicateError({str(config.name): f"Duplicate {config.kind.value}."})
            by_name[str(config.name)] = config
        return cls(
            configs=grouped,
            manager_config=manager_config or ManagerConfig(),
            master_policy_name=master_policy_name,
            reserved_role_names=frozenset(reserved_role_names),
        )

    # queries

    def names(self, kind: ServiceKind) -> Tuple[str, ...]:
        return tuple(self.configs[kind].keys())

    def has(self, kind: ServiceKind, name: Optional[str]) -> bool:
        return name is not None and name in self.configs[kind]

    def get(self, kind: ServiceKind, name: Optional[str]) -> Optional[NamedConfig]:
        if name is None:
            return None
        return self.configs[kind].get(name)

    def all_configs(self) -> Tuple[NamedConfig, ...]:
        return tuple(c for kind in ServiceKind for c in self.configs[kind].values())

    def active_auth_providers(self) -> Tuple[AuthProviderConfig, ...]:
        """Auth providers named by the manager config that exist, in manager order."""
        out = []
        for name in self.manager_config.auth_provider_names:
            provider = self.get(ServiceKind.AUTH_PROVIDER, name)
            if isinstance(provider, AuthProviderConfig):
                out.append(provider)
        return tuple(out)

    def active_user_group_services(self) -> Dict[str, str]:
        """Map active user/group service names to the first active provider using them."""
        out: Dict[str, str] = {}
        for provider in self.active_auth_providers():
            ug_name = provider.user_group_service_name
            if not ug_name or ug_name in out:
                continue
            if self.has(ServiceKind.USER_GROUP_SERVICE, ug_name):
                out[ug_name] = str(provider.name)
        return out

    def active_password_policies(self) -> Dict[str, str]:
        """Map policies used by active user/group services to the first such service."""
        out: Dict[str, str] = {}
        for ug_name in self.active_user_group_services():
            service = self.get(ServiceKind.USER_GROUP_SERVICE, ug_name)
            if not isinstance(service, UserGroupServiceConfig):
                continue
            policy = service.password_policy_name
            if policy and policy not in out:
                out[policy] = ug_name
        return out

    def filter_chain_using(self, filter_name: str) -> Optional[str]:
        for chain_name, filter_names in self.manager_config.filter_chain.items():
            if filter_name in filter_names:
                return chain_name
        return None

    # derivation

    def with_config(
        self, config: NamedConfig, *, previous_name: Optional[str] = None
    ) -> "SecuritySnapshot":
        by_name = dict(self.configs[config.kind])
        if previous_name is not None and previous_name != config.name:
            by_name.pop(previous_name, None)
        by_name[str(config.name)] = config
        return self._with_kind(config.kind, by_name)

    def without_config(self, kind: ServiceKind, name: str) -> "SecuritySnapshot":
        by_name = dict(self.configs[kind])
        by_name.pop(name, None)
        return self._with_kind(kind, by_name)

    def with_manager_config(self, manager_config: ManagerConfig) -> "SecuritySnapshot":
        return replace(self, manager_config=manager_config)

    def _with_kind(
        self, kind: ServiceKind, by_name: Mapping[str, NamedConfig]
    ) -> "SecuritySnapshot":
        configs = dict(self.configs)
        configs[kind] = by_name
        return replace(self, configs=configs)
