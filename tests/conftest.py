import io

import pytest

from db import get_engine, get_session
from main import create_app
from tests.factories import TENANT, bind_session


@pytest.fixture
def app(tmp_path):
    """Flask app on a fresh SQLite file per test."""
    app = create_app(f"sqlite:///{tmp_path / 'hrbi-test.sqlite'}")
    app.config["TESTING"] = True
    yield app
    get_engine().dispose()


@pytest.fixture
def session(app):
    """Session bound to the test database; factories write through it."""
    s = get_session()
    bind_session(s)
    yield s
    s.close()


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture
def upload(client):
    """POST a file to a bulk-import endpoint as multipart form data."""
    def _post(url, content, mimetype="text/csv", filename="employees.csv", tenant=TENANT):
        headers = {"X-Tenant-ID": tenant} if tenant else {}
        return client.post(
            url,
            data={"file": (io.BytesIO(content), filename, mimetype)},
            headers=headers,
            content_type="multipart/form-data",
        )
    return _post
