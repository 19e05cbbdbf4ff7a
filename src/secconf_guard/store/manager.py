from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Dict, Iterable, Optional, Tuple

from secconf_guard.exceptions import (
    ConfigNotFoundError,
    ConfigPersistenceError,
    SecurityConfigValidationError,
)
from secconf_guard.history import History
from secconf_guard.hooks import FailureMode, Hook, HookBus
from secconf_guard.model import (
    ManagerConfig,
    NamedConfig,
    ServiceKind,
    config_from_mapping,
)
from secconf_guard.settings import ValidatorSettings
from secconf_guard.snapshot import SecuritySnapshot
from secconf_guard.store.adaptors import PersistanceAdapterProtocol
from secconf_guard.validator import Operation, SecurityConfigValidator

logger = logging.getLogger("secconf_guard.store")
logger.addHandler(logging.NullHandler())


class SecurityConfigStore:
    """In-memory security configuration store gated by ``SecurityConfigValidator``.

    Each mutation validates against the current snapshot and swaps in the new
    snapshot while holding the same lock, so no other writer can change the state
    between validation and write. A rejected change leaves the snapshot, history
    and persisted document untouched.
    """

    def __init__(
        self,
        validator: Optional[SecurityConfigValidator] = None,
        settings: Optional[ValidatorSettings] = None,
        *,
        persistance_adapter: Optional[PersistanceAdapterProtocol] = None,
        history: Optional[History] = None,
        hook_failure_mode: FailureMode = "log",
    ) -> None:
        self._lock = threading.RLock()
        self._settings = settings or ValidatorSettings.from_env()
        self._validator = validator or SecurityConfigValidator(
            strong_encryption_available=self._settings.strong_encryption_available
        )
        self._snapshot = self._empty_snapshot()
        self._persistance_adapter = persistance_adapter
        self._history = history
        self._hooks = HookBus(hook_failure_mode)
        if self._persistance_adapter is not None:
            self.load()

        logger.debug(
            "SecurityConfigStore init master_policy=%r adapter=%s",
            self._settings.master_policy_name,
            type(persistance_adapter).__name__ if persistance_adapter else None,
        )

    def _empty_snapshot(self) -> SecuritySnapshot:
        return SecuritySnapshot.build(
            master_policy_name=self._settings.master_policy_name,
            reserved_role_names=self._settings.reserved_role_names,
        )

    @property
    def validator(self) -> SecurityConfigValidator:
        return self._validator

    @property
    def history(self) -> Optional[History]:
        return self._history

    # reads

    def snapshot(self) -> SecuritySnapshot:
        with self._lock:
            return self._snapshot

    @property
    def manager_config(self) -> ManagerConfig:
        return self.snapshot().manager_config

    def names(self, kind: ServiceKind) -> Tuple[str, ...]:
        return self.snapshot().names(kind)

    def get(self, kind: ServiceKind, name: str) -> NamedConfig:
        config = self.snapshot().get(kind, name)
        if config is None:
            raise ConfigNotFoundError({name: f"Unknown {kind.value}."})
        return config

    # mutations

    def add(self, config: NamedConfig, *, modified_by: str = "unknown", reason: str = "") -> None:
        with self._lock:
            current = self._snapshot
            self._validate(Operation.ADD, current, config)
            self._commit(
                current.with_config(config),
                operation=Operation.ADD,
                kind=config.kind,
                name=str(config.name),
                before=None,
                after=config.to_mapping(),
                modified_by=modified_by,
                reason=reason,
            )

    def modify(
        self,
        config: NamedConfig,
        *,
        previous_name: Optional[str] = None,
        modified_by: str = "unknown",
        reason: str = "",
    ) -> None:
        """Replace the config stored under ``previous_name`` (default: ``config.name``)."""
        old_name = previous_name if previous_name is not None else config.name
        with self._lock:
            current = self._snapshot
            old = current.get(config.kind, old_name)
            if old is None:
                # let the validator report the unknown name
                old = replace(config, name=old_name)
            self._validate(Operation.MODIFY, current, old, config)
            self._commit(
                current.with_config(config, previous_name=old.name),
                operation=Operation.MODIFY,
                kind=config.kind,
                name=str(config.name),
                before=old.to_mapping(),
                after=config.to_mapping(),
                modified_by=modified_by,
                reason=reason,
            )

    def remove(
        self, config: NamedConfig, *, modified_by: str = "unknown", reason: str = ""
    ) -> None:
        with self._lock:
            current = self._snapshot
            self._validate(Operation.REMOVE, current, config)
            stored = current.get(config.kind, config.name)
            self._commit(
                current.without_config(config.kind, str(config.name)),
                operation=Operation.REMOVE,
                kind=config.kind,
                name=str(config.name),
                before=stored.to_mapping() if stored is not None else None,
                after=None,
                modified_by=modified_by,
                reason=reason,
            )

    def update_manager_config(
        self, config: ManagerConfig, *, modified_by: str = "unknown", reason: str = ""
    ) -> None:
        with self._lock:
            current = self._snapshot
            self._validate(Operation.MANAGER, current, config)
            self._commit(
                current.with_manager_config(config),
                operation=Operation.MANAGER,
                kind=None,
                name="manager",
                before=current.manager_config.to_mapping(),
                after=config.to_mapping(),
                modified_by=modified_by,
                reason=reason,
            )

    def seed(
        self, configs: Iterable[NamedConfig], manager_config: Optional[ManagerConfig] = None
    ) -> None:
        """Replace the whole state without validation, for bootstrapping a known-good setup."""
        with self._lock:
            self._snapshot = SecuritySnapshot.build(
                configs,
                manager_config,
                master_policy_name=self._settings.master_policy_name,
                reserved_role_names=self._settings.reserved_role_names,
            )
            logger.info(
                "Security config store seeded with %d configs", len(self._snapshot.all_configs())
            )

    def register_post_update_hook(self, func: Hook, *, name: Optional[str] = None) -> str:
        with self._lock:
            return self._hooks.register(func, name=name)

    def unregister_post_update_hook(self, name: str) -> bool:
        with self._lock:
            return self._hooks.unregister(name)

    def _validate(self, operation: Operation, snapshot: SecuritySnapshot, *configs: Any) -> None:
        issue = self._validator.check(operation, snapshot, *configs)
        if issue is not None:
            logger.warning(
                "Rejected %s: %s %r", operation.value, issue.kind.value, issue.arguments
            )
            raise SecurityConfigValidationError(issue)

    def _commit(
        self,
        new_snapshot: SecuritySnapshot,
        *,
        operation: Operation,
        kind: Optional[ServiceKind],
        name: str,
        before: Optional[Dict[str, Any]],
        after: Optional[Dict[str, Any]],
        modified_by: str,
        reason: str,
    ) -> None:
        previous = self._snapshot
        self._snapshot = new_snapshot
        if self._persistance_adapter is not None:
            try:
                self.save()
            except Exception as e:
                self._snapshot = previous
                raise ConfigPersistenceError(
                    f"Could not persist {operation.value} of {name}"
                ) from e

        kind_label = kind.value if kind is not None else "MANAGER"
        if self._history is not None:
            self._history.add_entry(
                modified_by=modified_by,
                reason=reason,
                operation=operation.value,
                kind=kind_label,
                name=name,
                before=before,
                after=after,
            )
        logger.info("Accepted %s %s:%s by %s", operation.value, kind_label, name, modified_by)
        self._hooks.run(new_snapshot)

    # persistence

    def to_mapping(self) -> Dict[str, Any]:
        snapshot = self.snapshot()
        return {
            "services": [c.to_mapping() for c in snapshot.all_configs()],
            "manager": snapshot.manager_config.to_mapping(),
        }

    def load(self) -> None:
        if self._persistance_adapter is None:
            logger.error("Attempted to load security config but no PersistanceAdapter is set")
            raise RuntimeError("No PersistanceAdapter set for loading configuration")
        try:
            loaded = self._persistance_adapter.load()
            if not isinstance(loaded, dict):
                logger.error("PersistanceAdapter.load() did not return a dict")
                raise ValueError("PersistanceAdapter.load() must return a dict")
            configs = [config_from_mapping(item) for item in loaded.get("services", ())]
            manager = ManagerConfig.from_mapping(loaded.get("manager") or {})
            self.seed(configs, manager)
            logger.debug("Security config loaded from persistance adapter")
        except Exception as e:
            logger.error("Error loading security config from persistance adapter: %s", e)
            raise

    def save(self) -> None:
        if self._persistance_adapter is None:
            logger.error("Attempted to save security config but no PersistanceAdapter is set")
            raise RuntimeError("No PersistanceAdapter set for saving configuration")
        try:
            self._persistance_adapter.save(self.to_mapping())
            logger.debug("Security config saved to persistance adapter")
        except Exception as e:
            logger.error("Error saving security config to persistance adapter: %s", e)
            raise
