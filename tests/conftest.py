import io

import pytest
from PIL import Image

from api import create_app
from models import storage


CITIES = [{"id": 1, "name": "Moscow"}, {"id": 2, "name": "Kazan"}]
CATEGORIES = [{"id": 1, "name": "Music"}]
SUBCATEGORIES = [{"id": 1, "categoryId": 1, "name": "Guitar"}]


def image_bytes(size=(200, 200), fmt="PNG"):
    buf = io.BytesIO()
    Image.new("RGB", size, (200, 120, 40)).save(buf, fmt)
    return buf.getvalue()


PNG_BYTES = image_bytes()


@pytest.fixture
def app(tmp_path):
    app = create_app(
        "testing",
        overrides={
            "DB_PATH": str(tmp_path / "db"),
            "UPLOAD_ROOT": str(tmp_path / "uploads"),
            "UPLOAD_DIR": str(tmp_path / "uploads" / "avatars"),
        },
    )
    storage.write("cities", list(CITIES))
    storage.write("categories", list(CATEGORIES))
    storage.write("subcategories", list(SUBCATEGORIES))
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def registration_form(email="a@x.com", password="pw1234", **extra):
    form = {
        "email": email,
        "password": password,
        "name": "Test User",
        "firstName": "Test",
        "lastName": "User",
        "dateOfBirth": "1990-01-01",
        "gender": "M",
        "cityId": "1",
        "avatar": (io.BytesIO(PNG_BYTES), "avatar.png", "image/png"),
    }
    form.update(extra)
    return form


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user and return the JSON body ({user, accessToken, refreshToken})."""
    def _register(email="a@x.com", password="pw1234", **extra):
        resp = client.post(
            "/api/auth/register",
            data=registration_form(email, password, **extra),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()
    return _register
