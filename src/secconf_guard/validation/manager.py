from __future__ import annotations

from typing import Optional

from secconf_guard.issues import ErrorKind
from secconf_guard.model import ManagerConfig, ServiceKind
from secconf_guard.snapshot import SecuritySnapshot
from secconf_guard.utils import _is_blank

from .base import BaseSecurityValidator, fail


class ManagerConfigValidator(BaseSecurityValidator):
    """Rule chain for the singleton manager configuration.

    An absent role service and an unknown one are both reported as
    ``ROLE_SERVICE_NOT_FOUND``, while the config password encrypter keeps the
    ``PASSWORD_ENCODER_REQUIRED`` / ``INVALID_PASSWORD_ENCODER`` split.
    """

    def validate(self, snapshot: SecuritySnapshot, config: ManagerConfig) -> None:
        if not isinstance(config, ManagerConfig):
            raise TypeError(f"Expected ManagerConfig, got {type(config).__name__}")

        self._check_encrypter(config.config_password_encrypter_name)

        if not snapshot.has(ServiceKind.ROLE_SERVICE, config.role_service_name):
            fail(ErrorKind.ROLE_SERVICE_NOT_FOUND, config.role_service_name)

        for provider_name in config.auth_provider_names:
            if not snapshot.has(ServiceKind.AUTH_PROVIDER, provider_name):
                fail(ErrorKind.AUTH_PROVIDER_NOT_FOUND, provider_name)

        for filter_names in config.filter_chain.values():
            for filter_name in filter_names:
                if not snapshot.has(ServiceKind.SECURITY_FILTER, filter_name):
                    fail(ErrorKind.SECURITY_FILTER_NOT_FOUND, filter_name)

    def _check_encrypter(self, name: Optional[str]) -> None:
        if name is None or _is_blank(name):
            fail(ErrorKind.PASSWORD_ENCODER_REQUIRED)
        encoder = self.lookup_encoder(name)
        # the encrypter must be reversible
        if not encoder.exists or not encoder.reversible:
            fail(ErrorKind.INVALID_PASSWORD_ENCODER, name)
        if self.rejects_strong(encoder):
            fail(ErrorKind.INVALID_STRONG_CONFIG_PASSWORD_ENCODER)
