from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, Optional, Tuple

from secconf_guard.exceptions import ConfigDuplicateError, ConfigNotFoundError
from secconf_guard.model import ServiceKind

if TYPE_CHECKING:
    from secconf_guard.validation.protocol import ValidatorProtocol

logger = logging.getLogger("secconf_guard.capabilities")
logger.addHandler(logging.NullHandler())

XML_USER_GROUP_SERVICE = "xml.user_group_service"
MEMORY_USER_GROUP_SERVICE = "memory.user_group_service"
XML_ROLE_SERVICE = "xml.role_service"
MEMORY_ROLE_SERVICE = "memory.role_service"
PASSWORD_VALIDATOR = "password.validator"
USERNAME_PASSWORD_PROVIDER = "auth.username_password"
BASIC_AUTH_FILTER = "filter.basic_auth"
FORM_LOGIN_FILTER = "filter.form_login"
ANONYMOUS_FILTER = "filter.anonymous"
EXCEPTION_TRANSLATION_FILTER = "filter.exception_translation"


@dataclass(frozen=True)
class Capability:
    """A loadable implementation and the service kinds it can act as.

    ``validators`` hold implementation specific rules that run after the rules of
    the service kind itself.
    """

    implementation_id: str
    kinds: FrozenSet[ServiceKind] = frozenset()
    description: Optional[str] = None
    validators: Tuple["ValidatorProtocol", ...] = ()


class CapabilityRegistry:
    """Explicit map of implementation identifiers to statically known capabilities."""

    def __init__(self, capabilities: Iterable[Capability] = ()) -> None:
        self._capabilities: Dict[str, Capability] = {}
        for capability in capabilities:
            self.register(capability)
        logger.debug("CapabilityRegistry initialized with %d entries", len(self._capabilities))

    def register(self, capability: Capability, override: bool = False) -> None:
        key = capability.implementation_id.strip()
        if not key:
            raise ValueError("Capability implementation_id must not be blank")
        if not override and key in self._capabilities:
            logger.error("Register failed: %r already registered", key)
            raise ConfigDuplicateError({key: "Implementation already registered."})
        self._capabilities[key] = capability
        logger.debug(
            "Registered capability %r kinds=%s",
            key,
            sorted(k.value for k in capability.kinds),
        )

    def unregister(self, implementation_id: str) -> None:
        try:
            del self._capabilities[implementation_id]
        except KeyError:
            raise ConfigNotFoundError({implementation_id: "Unknown implementation."}) from None

    def resolve(self, implementation_id: str) -> Optional[Capability]:
        capability = self._capabilities.get(implementation_id.strip())
        logger.debug("Resolve(%r) -> %s", implementation_id, capability is not None)
        return capability

    @staticmethod
    def satisfies(kind: ServiceKind, capability: Capability) -> bool:
        return kind in capability.kinds

    def has(self, implementation_id: str) -> bool:
        return implementation_id.strip() in self._capabilities

    def implementations_of(self, kind: ServiceKind) -> Tuple[str, ...]:
        return tuple(sorted(k for k, c in self._capabilities.items() if kind in c.kinds))

    def all_ids(self) -> Tuple[str, ...]:
        return tuple(sorted(self._capabilities))

    def clear(self) -> None:
        self._capabilities.clear()


BUILTIN_CAPABILITIES: Tuple[Capability, ...] = (
    Capability(
        XML_USER_GROUP_SERVICE,
        frozenset({ServiceKind.USER_GROUP_SERVICE}),
        "Users and groups stored in an XML file",
    ),
    Capability(
        MEMORY_USER_GROUP_SERVICE,
        frozenset({ServiceKind.USER_GROUP_SERVICE}),
        "Users and groups held in memory",
    ),
    Capability(XML_ROLE_SERVICE, frozenset({ServiceKind.ROLE_SERVICE}), "Roles in an XML file"),
    Capability(MEMORY_ROLE_SERVICE, frozenset({ServiceKind.ROLE_SERVICE}), "Roles in memory"),
    Capability(
        PASSWORD_VALIDATOR,
        frozenset({ServiceKind.PASSWORD_POLICY}),
        "Length based password policy",
    ),
    Capability(
        USERNAME_PASSWORD_PROVIDER,
        frozenset({ServiceKind.AUTH_PROVIDER}),
        "Authenticates username/password against a user/group service",
    ),
    Capability(BASIC_AUTH_FILTER, frozenset({ServiceKind.SECURITY_FILTER})),
    Capability(FORM_LOGIN_FILTER, frozenset({ServiceKind.SECURITY_FILTER})),
    Capability(ANONYMOUS_FILTER, frozenset({ServiceKind.SECURITY_FILTER})),
    Capability(EXCEPTION_TRANSLATION_FILTER, frozenset({ServiceKind.SECURITY_FILTER})),
)


def default_capability_registry() -> CapabilityRegistry:
    """Return a fresh registry seeded with the built-in implementations."""
    return CapabilityRegistry(BUILTIN_CAPABILITIES)
