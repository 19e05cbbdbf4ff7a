from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Iterable, Mapping, Optional, Tuple, Type


class ServiceKind(str, Enum):
    USER_GROUP_SERVICE = "USER_GROUP_SERVICE"
    ROLE_SERVICE = "ROLE_SERVICE"
    PASSWORD_POLICY = "PASSWORD_POLICY"
    AUTH_PROVIDER = "AUTH_PROVIDER"
    SECURITY_FILTER = "SECURITY_FILTER"

    @property
    def error_prefix(self) -> str:
        """Prefix of the ``<KIND>_ALREADY_EXISTS`` / ``<KIND>_NOT_FOUND`` error kinds."""
        return _ERROR_PREFIXES[self]


_ERROR_PREFIXES: Dict[ServiceKind, str] = {
    ServiceKind.USER_GROUP_SERVICE: "USERGROUP_SERVICE",
    ServiceKind.ROLE_SERVICE: "ROLE_SERVICE",
    ServiceKind.PASSWORD_POLICY: "PASSWD_POLICY",
    ServiceKind.AUTH_PROVIDER: "AUTH_PROVIDER",
    ServiceKind.SECURITY_FILTER: "SECURITY_FILTER",
}


@dataclass(frozen=True)
class NamedConfig:
    """Shape shared by every named security service configuration."""

    kind: ClassVar[ServiceKind]

    name: Optional[str] = None
    implementation_id: Optional[str] = None

    def to_mapping(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


@dataclass(frozen=True)
class PasswordPolicyConfig(NamedConfig):
    kind: ClassVar[ServiceKind] = ServiceKind.PASSWORD_POLICY

    min_length: int = 0
    # -1 means unlimited
    max_length: int = -1


@dataclass(frozen=True)
class UserGroupServiceConfig(NamedConfig):
    kind: ClassVar[ServiceKind] = ServiceKind.USER_GROUP_SERVICE

    password_encoder_name: Optional[str] = None
    password_policy_name: Optional[str] = None


@dataclass(frozen=True)
class RoleServiceConfig(NamedConfig):
    kind: ClassVar[ServiceKind] = ServiceKind.ROLE_SERVICE

    admin_role_name: Optional[str] = None
    group_admin_role_name: Optional[str] = None


@dataclass(frozen=True)
class AuthProviderConfig(NamedConfig):
    kind: ClassVar[ServiceKind] = ServiceKind.AUTH_PROVIDER

    user_group_service_name: Optional[str] = None


@dataclass(frozen=True)
class SecurityFilterConfig(NamedConfig):
    kind: ClassVar[ServiceKind] = ServiceKind.SECURITY_FILTER


CONFIG_TYPES: Mapping[ServiceKind, Type[NamedConfig]] = MappingProxyType(
    {
        ServiceKind.PASSWORD_POLICY: PasswordPolicyConfig,
        ServiceKind.USER_GROUP_SERVICE: UserGroupServiceConfig,
        ServiceKind.ROLE_SERVICE: RoleServiceConfig,
        ServiceKind.AUTH_PROVIDER: AuthProviderConfig,
        ServiceKind.SECURITY_FILTER: SecurityFilterConfig,
    }
)


@dataclass(frozen=True)
class ManagerConfig:
    """Singleton configuration naming the services that are currently active.

    ``auth_provider_names`` is an ordered set: duplicates are dropped, keeping the
    first occurrence. ``filter_chain`` maps a chain name to the ordered filter names
    it applies.
    """

    role_service_name: Optional[str] = None
    config_password_encrypter_name: Optional[str] = None
    auth_provider_names: Tuple[str, ...] = ()
    filter_chain: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "auth_provider_names", tuple(dict.fromkeys(self.auth_provider_names))
        )
        object.__setattr__(
            self,
            "filter_chain",
            MappingProxyType({k: tuple(v) for k, v in dict(self.filter_chain).items()}),
        )

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "role_service_name": self.role_service_name,
            "config_password_encrypter_name": self.config_password_encrypter_name,
            "auth_provider_names": list(self.auth_provider_names),
            "filter_chain": {k: list(v) for k, v in self.filter_chain.items()},
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ManagerConfig":
        return cls(
            role_service_name=data.get("role_service_name"),
            config_password_encrypter_name=data.get("config_password_encrypter_name"),
            auth_provider_names=tuple(data.get("auth_provider_names") or ()),
            filter_chain=dict(data.get("filter_chain") or {}),
        )


def config_from_mapping(data: Mapping[str, Any]) -> NamedConfig:
    """Rebuild a named config from the kind-tagged mapping produced by ``to_mapping``."""
    values = dict(data)
    try:
        kind = ServiceKind(values.pop("kind"))
    except (KeyError, ValueError) as e:
        raise ValueError(f"Mapping does not carry a valid service kind: {data!r}") from e
    config_type = CONFIG_TYPES[kind]
    known = {f.name for f in fields(config_type)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown fields for {kind.value}: {unknown}")
    return config_type(**values)


def configs_from_mappings(items: Iterable[Mapping[str, Any]]) -> Tuple[NamedConfig, ...]:
    return tuple(config_from_mapping(item) for item in items)
