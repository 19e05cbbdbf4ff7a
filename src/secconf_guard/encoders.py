from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

from secconf_guard.exceptions import ConfigDuplicateError
from secconf_guard.utils import _env_flag

logger = logging.getLogger("secconf_guard.encoders")
logger.addHandler(logging.NullHandler())

STRONG_ENCRYPTION_ENV = "SECCONF_STRONG_ENCRYPTION"

PLAIN_TEXT = "plain"
EMPTY = "empty"
DIGEST = "digest"
PBE = "pbe"
STRONG_PBE = "strongPbe"


@dataclass(frozen=True)
class EncoderDescriptor:
    """What the validator needs to know about a named password encoder."""

    name: str
    exists: bool = True
    reversible: bool = False
    strong: bool = False

    @property
    def is_reversible_strong(self) -> bool:
        return self.exists and self.reversible and self.strong


class EncoderRegistry:
    def __init__(self, encoders: Iterable[EncoderDescriptor] = ()) -> None:
        self._encoders: Dict[str, EncoderDescriptor] = {}
        for encoder in encoders:
            self.register(encoder)

    def register(self, encoder: EncoderDescriptor, override: bool = False) -> None:
        if not encoder.exists:
            raise ValueError(f"Cannot register missing encoder {encoder.name!r}")
        if not override and encoder.name in self._encoders:
            logger.error("Register failed: encoder %r already registered", encoder.name)
            raise ConfigDuplicateError({encoder.name: "Encoder already registered."})
        self._encoders[encoder.name] = encoder

    def lookup(self, name: str) -> EncoderDescriptor:
        """Describe encoder ``name``; unknown names yield a descriptor with ``exists=False``."""
        encoder = self._encoders.get(name)
        if encoder is None:
            logger.debug("Encoder %r not registered", name)
            return EncoderDescriptor(name, exists=False)
        return encoder

    def names(self) -> Tuple[str, ...]:
        return tuple(sorted(self._encoders))


BUILTIN_ENCODERS: Tuple[EncoderDescriptor, ...] = (
    EncoderDescriptor(PLAIN_TEXT, reversible=True),
    EncoderDescriptor(EMPTY),
    EncoderDescriptor(DIGEST),
    EncoderDescriptor(PBE, reversible=True),
    EncoderDescriptor(STRONG_PBE, reversible=True, strong=True),
)


def default_encoder_registry() -> EncoderRegistry:
    return EncoderRegistry(BUILTIN_ENCODERS)


def is_strong_encryption_available() -> bool:
    """Strong encryption is off unless the runtime opts in via ``SECCONF_STRONG_ENCRYPTION=1``."""
    return _env_flag(STRONG_ENCRYPTION_ENV)
