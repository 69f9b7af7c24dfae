"""Writer lock per asset and atomic read snapshots.

The engine itself is synchronous; these locks only matter when a host runs
previews on another thread. Asset attributes are shared by every placement,
so the lock is keyed by asset id and covers all instance writes of that
asset as well. Writers stage and commit under `store_lock`; readers that
cannot share the writer's thread resolve against `snapshot` copies taken
under the same lock, so a half-applied multi-field write is never visible.

Locks are held weakly: an entry disappears once no thread holds or waits
on it, so deleted assets leave nothing behind.
"""
import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager

from models.instance import TextAssetInstance
from models.text_asset import TextAsset

_registry_lock = threading.Lock()
_locks: "weakref.WeakValueDictionary[str, threading.RLock]" = weakref.WeakValueDictionary()


def _lock_for(asset: TextAsset) -> threading.RLock:
    with _registry_lock:
        lock = _locks.get(asset.id)
        if lock is None:
            lock = threading.RLock()
            _locks[asset.id] = lock
        return lock


@contextmanager
def store_lock(asset: TextAsset) -> Iterator[None]:
    with _lock_for(asset):
        yield


def snapshot(
    asset: TextAsset,
    instance: TextAssetInstance | None,
) -> tuple[TextAsset, TextAssetInstance | None]:
    """Deep copies of the pair, taken atomically with respect to writers."""
    with store_lock(asset):
        return (
            asset.model_copy(deep=True),
            instance.model_copy(deep=True) if instance is not None else None,
        )

