"""
Versioned state store.

The Store owns the single canonical state object for one persistence medium.
Consumers never hold a reference to it:

- get_state() hands out deep copies (snapshots)
- set_state(mutator) is the only way to change state
- subscribe(listener) delivers a fresh snapshot after every set_state

Mutations are synchronous and serialized: the mutator works on a private copy,
and the canonical state is swapped only after it returns. Persistence is
best-effort (write failures are logged, the in-memory change stands);
notification happens after persistence.

Usage:
    from muster.contexts.state import JsonFileStorage, Store

    store = Store(JsonFileStorage(Path("outs/state")))
    unsubscribe = store.subscribe(lambda snapshot: print(len(snapshot["applicants"])))

    def rename(state):
        state["settings"]["recruiterName"] = "SSG Rivera"

    store.set_state(rename)
"""

import copy
import json
from typing import Any, Callable, Dict, List, Optional

from muster.contexts.state.defaults import CURRENT_SCHEMA_VERSION, seed_state
from muster.contexts.state.exceptions import StoreError
from muster.contexts.state.exchange import (
    ImportSummary,
    export_state,
    merge_import,
    parse_import_payload,
)
from muster.contexts.state.logger import (
    _log_debug,
    _log_error,
    _log_info,
    log_load_fallback,
    log_persist_failure,
)
from muster.contexts.state.migrations import assemble_legacy_record, migrate
from muster.utils.event_logging import log_pipeline_event

STORAGE_KEY = "recruitment-tracker-state"

State = Dict[str, Any]
Mutator = Callable[[State], Optional[State]]
Listener = Callable[[State], None]


class Store:
    """
    Canonical state holder with snapshot/mutate/subscribe.

    Attributes:
        storage: Persistence medium (get/set/remove by key)
        key: Storage key holding the serialized state
    """

    def __init__(self, storage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._listeners: List[Listener] = []
        self._mutating = False
        self._state: State = self._load()

    # =========================================================================
    # LOADING & PERSISTENCE
    # =========================================================================

    def _read_raw(self) -> Any:
        """Read and parse the persisted record; None when nothing is stored."""
        text = self.storage.get(self.key)
        if text is None:
            legacy = assemble_legacy_record(self.storage)
            if legacy is not None:
                _log_info("Assembled state from legacy per-collection keys")
            return legacy
        return json.loads(text)

    def _load(self) -> State:
        try:
            raw = self._read_raw()
        except Exception as e:
            log_load_fallback(self.key, f"{e.__class__.__name__}: {e}")
            raw = None

        if raw is None:
            _log_debug(f"No persisted state under '{self.key}', seeding")
        return migrate(raw)

    def _persist(self, state: State) -> bool:
        try:
            self.storage.set(self.key, json.dumps(state))
        except Exception as e:
            log_persist_failure(self.key, e)
            return False
        return True

    # =========================================================================
    # SNAPSHOT / MUTATE / SUBSCRIBE
    # =========================================================================

    def get_state(self) -> State:
        """Independent deep copy of the current state."""
        return copy.deepcopy(self._state)

    def set_state(self, mutator: Mutator) -> State:
        """
        Apply a mutation, persist, and notify subscribers.

        The mutator receives a private working copy. It may change it in place
        (returning None) or return a replacement state. If it raises, the
        canonical state is untouched and the exception propagates.

        Args:
            mutator: Callable taking the working copy

        Returns:
            Snapshot of the new state

        Raises:
            StoreError: If called from inside another mutator
        """
        if self._mutating:
            raise StoreError("set_state() called from inside a mutator")

        draft = copy.deepcopy(self._state)
        self._mutating = True
        try:
            result = mutator(draft)
        finally:
            self._mutating = False

        if result is not None:
            draft = copy.deepcopy(result)
        if not isinstance(draft, dict):
            raise StoreError(f"Mutator produced {type(draft).__name__}, expected a state dict")

        draft["schemaVersion"] = CURRENT_SCHEMA_VERSION
        self._state = draft

        self._persist(self._state)
        self._notify()
        return self.get_state()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for future mutations.

        The listener is not called on subscribe. Returns an unsubscribe
        callable; calling it more than once is harmless.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.get_state())
            except Exception as e:
                _log_error(f"Subscriber {listener!r} failed: {e.__class__.__name__}: {e}")

    # =========================================================================
    # WHOLE-STATE OPERATIONS
    # =========================================================================

    def reset(self) -> State:
        """Replace everything with fresh seed data."""
        return self.set_state(lambda _: seed_state())

    def export_payload(self, scope: str = "full") -> str:
        """Serialize the current state ("full") or the weekly subset ("weekly")."""
        return export_state(self._state, scope=scope)

    def import_payload(self, text: str) -> ImportSummary:
        """
        Merge an untrusted JSON payload into the store.

        The payload is fully validated before any mutation, so a malformed
        payload leaves the store unchanged.

        Raises:
            ImportPayloadError: If the payload is malformed
        """
        payload = parse_import_payload(text)
        summary = ImportSummary()

        def apply(state: State) -> None:
            merged = merge_import(state, payload)
            summary.added, summary.updated = merged.added, merged.updated
            summary.settings_updated = merged.settings_updated

        self.set_state(apply)
        _log_info(f"Imported payload: added {summary.added}, updated {summary.updated}")
        log_pipeline_event(
            "import", "*", "import", added=summary.added, updated=summary.updated
        )
        return summary

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)

    def __repr__(self) -> str:
        return f"Store(storage={self.storage!r}, key={self.key!r})"
