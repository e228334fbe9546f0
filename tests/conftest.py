import pytest

from app import create_app
from app.services import store
from app.services.tokens import derive_sub_token
from app.models import now_ms


@pytest.fixture
def app():
    app = create_app({
        'TESTING': True,
        'USE_REDIS': False,
        'BASE_URL': None,
        'PUBLIC_HOST': None,
        'AUDIT_LOG_PATH': None,
        'DEBUG_ROUTES': False,
        'TOKEN_TTL_HOURS': 24,
    })
    store._set(store._MemStore())
    yield app
    store.reset()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    with app.test_request_context('/'):
        yield


def issue(client, cliente='Ana', ruta='R1', productos='[{"nombre": "Leche", "cantidad": 2}]'):
    r = client.get('/generate-token', query_string={'cliente': cliente, 'ruta': ruta, 'productos': productos})
    assert r.status_code == 200
    return r.get_json()


def confirm_payload(token, timestamp=None):
    ts = now_ms() if timestamp is None else timestamp
    return {'mainToken': token, 'subToken': derive_sub_token(token, ts), 'timestamp': ts}
