import logging

import pytest
import redis
from loguru import logger

from app import create_app
from app.services import store


@pytest.fixture
def unreachable_app(monkeypatch):
    app = create_app({
        'TESTING': True,
        'USE_REDIS': True,
        'REDIS_URL': 'redis://127.0.0.1:1/0',
        'BASE_URL': None,
        'PUBLIC_HOST': None,
        'AUDIT_LOG_PATH': None,
    })
    monkeypatch.setattr(store, '_r', None)
    return app


def test_unreachable_redis_is_a_server_error(unreachable_app):
    client = unreachable_app.test_client()
    r = client.get('/generate-token', query_string={'cliente': 'Ana', 'ruta': 'R1'})
    assert r.status_code == 500
    assert r.get_json()['error'] == 'server_error'
    assert store._r is None


def test_unreachable_redis_is_not_cached(unreachable_app):
    with unreachable_app.app_context():
        for _ in range(2):
            with pytest.raises(redis.exceptions.ConnectionError):
                store.r()
            assert store._r is None


def test_memory_store_only_when_redis_is_off(monkeypatch):
    app = create_app({'TESTING': True, 'USE_REDIS': False, 'AUDIT_LOG_PATH': None})
    monkeypatch.setattr(store, '_r', None)
    with app.app_context():
        assert isinstance(store.r(), store._MemStore)


def test_mem_lock_times_out():
    mem = store._MemStore()
    with mem.lock('lock:k', blocking_timeout=0.05):
        with pytest.raises(redis.exceptions.LockError):
            with mem.lock('lock:k', blocking_timeout=0.05):
                pass


def test_stdlib_records_reach_loguru():
    create_app({'TESTING': True, 'USE_REDIS': False, 'AUDIT_LOG_PATH': None})
    seen = []
    sink = logger.add(lambda msg: seen.append(msg.record), level='INFO')
    try:
        logging.getLogger('werkzeug').info('GET /health 200')
        logging.getLogger('some.library').warning('disk almost full')
    finally:
        logger.remove(sink)
    assert [(r['level'].name, r['message']) for r in seen] == [
        ('INFO', 'GET /health 200'),
        ('WARNING', 'disk almost full'),
    ]
