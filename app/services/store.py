import threading
import redis
from flask import current_app
from loguru import logger

_r = None
_lock = threading.Lock()


class _MemLock:
    """threading.Lock with the subset of the redis Lock API we use."""

    def __init__(self, lock: threading.Lock, blocking_timeout: float | None):
        self._lock = lock
        self._blocking_timeout = blocking_timeout

    def __enter__(self):
        timeout = -1 if self._blocking_timeout is None else self._blocking_timeout
        if not self._lock.acquire(timeout=timeout):
            raise redis.exceptions.LockError('Unable to acquire lock within the time specified')
        return self

    def __exit__(self, *exc):
        self._lock.release()
        return False


class _MemStore:
    """Process-local blob store. Only safe with a single worker process."""

    def __init__(self):
        self._data = {}
        self._locks = {}
        self._lock = threading.Lock()

    def get(self, key):
        with self._lock:
            return self._data.get(key)

    def set(self, key, value):
        with self._lock:
            self._data[key] = value
            return True

    def delete(self, key):
        with self._lock:
            return 1 if self._data.pop(key, None) is not None else 0

    def lock(self, name, timeout=None, blocking_timeout=None):
        with self._lock:
            lk = self._locks.setdefault(name, threading.Lock())
        return _MemLock(lk, blocking_timeout)

    def ping(self):
        return True


def r():
    global _r
    if _r is not None:
        return _r
    with _lock:
        if _r is not None:
            return _r
        # In-memory store only when Redis is switched off; with Redis on, a
        # failed PING propagates and nothing is cached, so the next call retries.
        url = current_app.config.get('REDIS_URL')
        if not (current_app.config.get('USE_REDIS') and url):
            logger.warning("blob store: USE_REDIS off, using in-memory store (single process only)")
            _set(_MemStore())
            return _r
        client = redis.from_url(url, decode_responses=True)
        client.ping()
        _set(client)
        logger.info("blob store: redis at {}", client.connection_pool.connection_kwargs.get('host'))
        return _r


def _set(store):
    global _r
    _r = store


def reset():
    _set(None)


def collection_lock(key: str):
    """Mutual exclusion for a load-mutate-save cycle on one blob key."""
    cfg = current_app.config
    return r().lock(
        f"lock:{key}",
        timeout=cfg.get('LOCK_TIMEOUT', 10),
        blocking_timeout=cfg.get('LOCK_BLOCKING_TIMEOUT', 5),
    )
