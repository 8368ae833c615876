"""
Thread-safe registry of application_id -> Lock so one process never runs two
syncs of the same app at once. An entry lives only while a sync holds or
waits for it.
"""
import threading
import logging
from contextlib import contextmanager
from typing import Dict, List

logger = logging.getLogger(__name__)
_lock = threading.Lock()
# application_id -> [lock, holders and waiters]
_registry: Dict[str, List] = {}


def _acquire_entry(application_id: str) -> threading.Lock:
    with _lock:
        entry = _registry.get(application_id)
        if entry is None:
            entry = [threading.Lock(), 0]
            _registry[application_id] = entry
        entry[1] += 1
        return entry[0]


def _release_entry(application_id: str) -> None:
    with _lock:
        entry = _registry[application_id]
        entry[1] -= 1
        if entry[1] == 0:
            del _registry[application_id]


def is_locked(application_id: str) -> bool:
    with _lock:
        entry = _registry.get(application_id)
    return entry is not None and entry[0].locked()


def registered_count() -> int:
    with _lock:
        return len(_registry)


@contextmanager
def application_lock(application_id: str):
    """Serialize syncs per application. Callers for other applications are never blocked."""
    lock = _acquire_entry(application_id)
    try:
        if lock.locked():
            logger.info(f"Sync already running for application {application_id}; waiting")
        with lock:
            yield
    finally:
        _release_entry(application_id)
