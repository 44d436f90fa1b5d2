from fastapi.testclient import TestClient
import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict
from sqlalchemy.pool import StaticPool

from finadvisor.config import Settings
from finadvisor.data.base import build_engine, create_session_factory, create_tables
from finadvisor.main import create_app


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(engine):
    app = create_app(engine=engine, settings=Settings(log_level="WARNING"))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    def _register(nombre_usuario="ana", contrasena="pw1"):
        resp = client.post(
            "/usuarios", json={"nombre_usuario": nombre_usuario, "contrasena": contrasena}
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _register


class InProcessAdapter(BaseAdapter):
    """Sends requests made through a requests.Session to the in-process app."""

    def __init__(self, test_client: TestClient):
        super().__init__()
        self.test_client = test_client

    def send(self, request, **kwargs):
        resp = self.test_client.request(
            request.method,
            request.url,
            content=request.body,
            headers=dict(request.headers),
        )
        result = requests.Response()
        result.status_code = resp.status_code
        result._content = resp.content
        result.headers = CaseInsensitiveDict(resp.headers)
        result.encoding = "utf-8"
        result.url = request.url
        result.request = request
        return result

    def close(self):
        pass


@pytest.fixture
def http_session(client):
    session = requests.Session()
    session.mount("http://testserver", InProcessAdapter(client))
    return session
