import copy
import os
import re
import sys

import pytest

# ensure project root is on sys.path when running from tests/ folder
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..')))

# sin archivos de log durante los tests
os.environ['FACTORY_ENABLE_PROFILING'] = '0'
os.environ.pop('FACTORY_API_TOKEN', None)

from factory_dashboard.app_container import AppContainer, get_container
from factory_dashboard.repositories.api_client import ApiError


class FakeApiClient:
    """
    Backend REST en memoria.

    - Colecciones: GET/POST en /recurso, GET/PUT/DELETE en /recurso/<_id>
    - Respuestas fijas por (método, ruta); si el valor es una excepción se lanza
    - `calls` guarda (método, ruta, cuerpo o params) en orden
    """

    RESOURCES = (
        '/inventory',
        '/financial',
        '/hr/employees',
        '/hr/attendance',
        '/quality',
        '/warehouse',
        '/maintenance',
    )

    def __init__(self):
        self.collections = {resource: [] for resource in self.RESOURCES}
        self.responses = {
            ('GET', '/dashboard/stats'): {},
            ('GET', '/financial/payroll-status'): {'isPending': False, 'isProcessed': False},
            ('GET', '/financial/ledger'): [],
            ('GET', '/financial/daily-report'): {},
            ('GET', '/maintenance-mode/status'): {'isActive': False, 'data': None},
            ('GET', '/maintenance-mode/history'): [],
        }
        self.calls = []
        self._next_id = 1

    def seed(self, resource, *records):
        """Agrega registros con _id automático si no lo traen."""
        for record in records:
            record = dict(record)
            if '_id' not in record:
                record['_id'] = self._new_id(resource)
            self.collections[resource].append(record)
        return self.collections[resource]

    def _new_id(self, resource):
        value = f"{resource.strip('/').replace('/', '-')}-{self._next_id}"
        self._next_id += 1
        return value

    def calls_for(self, method, path=None):
        return [c for c in self.calls if c[0] == method and (path is None or c[1] == path)]

    def request(self, method, path, params=None, json=None):
        self.calls.append((method, path, json if json is not None else params))

        key = (method, path)
        if key in self.responses:
            value = self.responses[key]
            if isinstance(value, Exception):
                raise value
            return copy.deepcopy(value)

        if path in self.collections:
            items = self.collections[path]
            if method == 'GET':
                return copy.deepcopy(items)
            if method == 'POST':
                record = dict(json or {})
                record['_id'] = self._new_id(path)
                items.append(record)
                return copy.deepcopy(record)

        parent, _, record_id = path.rpartition('/')
        if parent in self.collections:
            items = self.collections[parent]
            index = next((i for i, r in enumerate(items) if r.get('_id') == record_id), None)
            if index is None:
                raise ApiError("Not found", 404)
            if method == 'GET':
                return copy.deepcopy(items[index])
            if method == 'PUT':
                record = dict(json or {})
                record['_id'] = record_id
                items[index] = record
                return copy.deepcopy(record)
            if method == 'DELETE':
                items.pop(index)
                return {'message': 'deleted'}

        raise ApiError(f"Unexpected {method} {path}", 404)

    def get(self, path, params=None):
        return self.request('GET', path, params=params)

    def post(self, path, json=None):
        return self.request('POST', path, json=json)

    def put(self, path, json=None):
        return self.request('PUT', path, json=json)

    def delete(self, path):
        return self.request('DELETE', path)


@pytest.fixture
def fake_api():
    AppContainer.reset_instance()
    fake = FakeApiClient()
    get_container(client=fake)
    yield fake
    AppContainer.reset_instance()


@pytest.fixture
def container(fake_api):
    return get_container()


@pytest.fixture
def client(fake_api):
    from factory_dashboard.main import app
    app.config['TESTING'] = True
    with app.test_client() as c:
        yield c


@pytest.fixture
def csrf_token(client):
    """GET a una página para obtener el token CSRF de la sesión."""
    def fetch(path='/login'):
        r = client.get(path)
        assert r.status_code == 200
        m = re.search(r'name="csrf_token" value="([0-9a-f]+)"', r.get_data(as_text=True))
        assert m, 'no csrf token in page'
        return m.group(1)
    return fetch
