from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ValidatorProtocol(Protocol):
    # (config, snapshot); raise SecurityConfigValidationError on failure
    def __call__(self, config: Any, snapshot: Any) -> None: ...
