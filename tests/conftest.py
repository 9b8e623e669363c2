"""
Shared fixtures for the boxcloud test suite.

The environment is pointed at a throwaway directory BEFORE any boxcloud
module is imported: the engine and the settings singleton read it at import
time.

- Every test starts with empty tables and an empty upload directory.
- `client` is a TestClient around a freshly built app (fresh rate-limit
  counters); entering it runs the app lifespan.
- `license_code` registers a code with room for many registrations.
"""

import os
import shutil
import tempfile

_TEST_ROOT = tempfile.mkdtemp(prefix="boxcloud-tests-")
os.environ["DB_PATH"] = os.path.join(_TEST_ROOT, "test.sqlite")
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_ROOT, "uploads")
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_MAX_REQUESTS"] = "100000"
os.environ["PUBLIC_BASE_URL"] = "http://testserver.local"
os.environ.pop("LICENSE_CODES_FILE", None)

import pytest  # noqa: E402
from starlette.testclient import TestClient  # noqa: E402

from boxcloud.database.config.config import settings  # noqa: E402
from boxcloud.database.config.connection_engine import connection_engine, metadata  # noqa: E402
from boxcloud.database.core.funcs import add_license_code  # noqa: E402
import boxcloud.database.entities  # noqa: E402,F401

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"
TEST_LICENSE = "TEST-LICENSE-0001"


def upload_dir() -> str:
    return os.path.abspath(settings.UPLOAD_DIR)


def stored_files() -> list[str]:
    path = upload_dir()
    return sorted(os.listdir(path)) if os.path.isdir(path) else []


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def pdf_file(name: str = "doc.pdf", content: bytes = PDF_BYTES, mime: str = "application/pdf"):
    return ("pdfs", (name, content, mime))


@pytest.fixture(autouse=True)
def clean_state():
    metadata.drop_all(connection_engine)
    metadata.create_all(connection_engine)
    shutil.rmtree(upload_dir(), ignore_errors=True)
    os.makedirs(upload_dir(), exist_ok=True)
    yield
    shutil.rmtree(upload_dir(), ignore_errors=True)


@pytest.fixture
def app():
    from boxcloud.main import create_app

    return create_app()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def license_code():
    add_license_code(code=TEST_LICENSE, max_uses=1000)
    return TEST_LICENSE


@pytest.fixture
def register(client, license_code):
    """Factory: register a user and return the response JSON (includes `token`)."""

    def _register(email: str = "alice@example.com", name: str = "Alice", password: str = "secret1"):
        r = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password, "licenseCode": license_code},
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _register


@pytest.fixture
def alice(register):
    user = register()
    user["headers"] = auth_headers(user["token"])
    return user


@pytest.fixture
def bob(register):
    user = register(email="bob@example.com", name="Bob", password="hunter22")
    user["headers"] = auth_headers(user["token"])
    return user


@pytest.fixture
def box(client, alice):
    r = client.post("/api/boxes", json={"name": "Taxes 2024"}, headers=alice["headers"])
    assert r.status_code == 201, r.text
    return r.json()
