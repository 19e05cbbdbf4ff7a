from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Tuple

from secconf_guard.encoders import STRONG_ENCRYPTION_ENV
from secconf_guard.utils import _env_flag, _env_value

logger = logging.getLogger("secconf_guard.settings")
logger.addHandler(logging.NullHandler())

MASTER_POLICY_ENV = "SECCONF_MASTER_POLICY"

DEFAULT_MASTER_POLICY_NAME = "master"

ADMIN_ROLE = "ROLE_ADMINISTRATOR"
GROUP_ADMIN_ROLE = "ROLE_GROUP_ADMIN"
AUTHENTICATED_ROLE = "ROLE_AUTHENTICATED"
ANONYMOUS_ROLE = "ROLE_ANONYMOUS"

SYSTEM_ROLES: Tuple[str, ...] = (ADMIN_ROLE, GROUP_ADMIN_ROLE, AUTHENTICATED_ROLE, ANONYMOUS_ROLE)


@dataclass(frozen=True)
class ValidatorSettings:
    master_policy_name: str = DEFAULT_MASTER_POLICY_NAME
    reserved_role_names: FrozenSet[str] = field(default_factory=lambda: frozenset(SYSTEM_ROLES))
    strong_encryption_available: bool = False

    @classmethod
    def from_env(cls) -> "ValidatorSettings":
        settings = cls(
            master_policy_name=_env_value(MASTER_POLICY_ENV, DEFAULT_MASTER_POLICY_NAME),
            strong_encryption_available=_env_flag(STRONG_ENCRYPTION_ENV),
        )
        logger.debug(
            "Settings from env master_policy=%r strong_encryption=%s",
            settings.master_policy_name,
            settings.strong_encryption_available,
        )
        return settings
