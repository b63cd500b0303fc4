import io

import pytest
from PIL import Image

import api.auth
from conftest import auth_header, image_bytes, registration_form
from models.refresh_token import RefreshTokenRepository
from models.user import UserRepository


def post_register(client, **form):
    return client.post("/api/auth/register", data=form, content_type="multipart/form-data")


def login(client, email="a@x.com", password="pw1234"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


class TestRegister:

    def test_register_returns_user_and_tokens(self, client, app, tmp_path):
        resp = post_register(client, **registration_form())
        assert resp.status_code == 201
        body = resp.get_json()
        assert set(body) == {"user", "accessToken", "refreshToken"}
        user = body["user"]
        assert user["id"] == 1
        assert user["email"] == "a@x.com"
        assert user["cityId"] == 1
        assert "password" not in user
        assert user["avatarUrl"].startswith("http://localhost/uploads/avatars/avatar-")
        assert user["avatarUrl"].endswith(".png")
        avatar = user["avatarUrl"].rsplit("/", 1)[1]
        base = avatar[: -len(".png")]
        avatars = {p.name for p in (tmp_path / "uploads" / "avatars").iterdir()}
        assert avatars == {avatar, f"{base}-200x200.jpg", f"{base}-100x100.jpg"}

    def test_password_is_stored_hashed(self, client, app, register):
        register()
        with app.app_context():
            stored = UserRepository().get(1)
        assert stored["password"] != "pw1234"
        assert stored["password"].startswith("$argon2")

    def test_ids_are_sequential(self, register):
        assert register("a@x.com")["user"]["id"] == 1
        assert register("b@x.com")["user"]["id"] == 2

    def test_register_then_login(self, client, register):
        register()
        assert login(client).status_code == 200

    def test_refresh_token_persisted(self, app, register):
        body = register()
        with app.app_context():
            records = RefreshTokenRepository().all()
        assert records == [
            {"userId": 1, "token": body["refreshToken"], "createdAt": records[0]["createdAt"]}
        ]

    def test_duplicate_email(self, client, app, register):
        first = register()
        resp = post_register(client, **registration_form(name="Someone Else"))
        assert resp.status_code == 400
        assert "already exists" in resp.get_json()["error"]
        with app.app_context():
            users = UserRepository().all()
        assert len(users) == 1
        assert users[0]["name"] == first["user"]["name"]

    def test_unknown_city(self, client):
        resp = post_register(client, **registration_form(cityId="42"))
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "City with ID 42 not found"

    def test_missing_avatar(self, client):
        form = registration_form()
        del form["avatar"]
        resp = post_register(client, **form)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Avatar is required"

    def test_avatar_wrong_type(self, client):
        form = registration_form(avatar=(io.BytesIO(b"hello"), "notes.txt", "text/plain"))
        resp = post_register(client, **form)
        assert resp.status_code == 400
        assert "Unsupported file type" in resp.get_json()["error"]

    def test_avatar_that_is_not_an_image(self, client, app, tmp_path):
        form = registration_form(
            avatar=(io.BytesIO(b"this is not an image at all"), "evil.png", "image/png")
        )
        resp = post_register(client, **form)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Could not process the image"
        with app.app_context():
            assert UserRepository().all() == []
        avatars = tmp_path / "uploads" / "avatars"
        assert not avatars.exists() or list(avatars.iterdir()) == []

    @pytest.mark.parametrize("size", [(199, 400), (400, 150)])
    def test_avatar_too_small(self, client, size):
        form = registration_form(avatar=(io.BytesIO(image_bytes(size)), "small.png", "image/png"))
        resp = post_register(client, **form)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Minimum image size is 200x200px"

    def test_thumbnails_are_cover_cropped(self, client, tmp_path):
        form = registration_form(
            avatar=(io.BytesIO(image_bytes((400, 300), "JPEG")), "photo.jpg", "image/jpeg")
        )
        resp = post_register(client, **form)
        assert resp.status_code == 201
        avatar = resp.get_json()["user"]["avatarUrl"].rsplit("/", 1)[1]
        base = avatar[: -len(".jpg")]
        directory = tmp_path / "uploads" / "avatars"
        for size in [(200, 200), (100, 100)]:
            with Image.open(directory / f"{base}-{size[0]}x{size[1]}.jpg") as thumb:
                assert thumb.size == size
                assert thumb.format == "JPEG"

    def test_failed_token_issue_rolls_back_user(self, client, app, tmp_path, monkeypatch):
        def broken_save(user_id, token):
            raise OSError("disk full")

        monkeypatch.setattr(api.auth.refresh_tokens, "save", broken_save)
        resp = post_register(client, **registration_form())
        assert resp.status_code == 500
        with app.app_context():
            assert UserRepository().all() == []
        assert list((tmp_path / "uploads" / "avatars").iterdir()) == []

        monkeypatch.undo()
        assert post_register(client, **registration_form()).status_code == 201

    def test_validation_errors_listed_per_field(self, client, app):
        form = registration_form(email="nope", gender="X", cityId="abc")
        resp = post_register(client, **form)
        assert resp.status_code == 400
        body = resp.get_json()
        assert body["error"] == "Validation error"
        assert {d["field"] for d in body["details"]} == {"email", "gender", "cityId"}
        with app.app_context():
            assert UserRepository().all() == []

    def test_validation_runs_before_avatar_check(self, client):
        form = registration_form(password="1")
        del form["avatar"]
        resp = post_register(client, **form)
        assert resp.status_code == 400
        assert resp.get_json()["details"][0]["field"] == "password"


class TestLogin:

    def test_login_returns_user_and_tokens(self, client, register):
        register()
        resp = login(client)
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["user"]["email"] == "a@x.com"
        assert "password" not in body["user"]
        assert body["accessToken"] and body["refreshToken"]

    def test_login_updates_last_login(self, client, app, register):
        registered = register()
        resp = login(client)
        assert resp.get_json()["user"]["lastLoginDatetime"] >= registered["user"]["lastLoginDatetime"]

    def test_wrong_password_and_unknown_email_look_the_same(self, client, register):
        register()
        wrong_password = login(client, password="nope123")
        unknown_email = login(client, email="ghost@x.com")
        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.get_json() == unknown_email.get_json() == {"error": "Invalid email or password"}

    def test_user_without_password_hash(self, client, app, register):
        register()
        with app.app_context():
            UserRepository().update(1, {"password": None})
        assert login(client).status_code == 401

    def test_login_validation(self, client):
        resp = client.post("/api/auth/login", json={"email": "bad"})
        assert resp.status_code == 400
        assert {d["field"] for d in resp.get_json()["details"]} == {"email", "password"}

    def test_email_is_case_sensitive(self, client, register):
        register()
        assert login(client, email="A@x.com").status_code == 401

    def test_login_supersedes_previous_refresh_token(self, client, app, register):
        r1 = register()["refreshToken"]
        r2 = login(client).get_json()["refreshToken"]
        assert r1 != r2
        with app.app_context():
            records = RefreshTokenRepository().find(userId=1)
        assert [r["token"] for r in records] == [r2]


class TestRefresh:

    def test_refresh_issues_access_token(self, client, register):
        body = register()
        resp = client.post("/api/auth/refresh", json={"refreshToken": body["refreshToken"]})
        assert resp.status_code == 200
        new_access = resp.get_json()["accessToken"]
        assert set(resp.get_json()) == {"accessToken"}
        assert client.get("/api/auth/me", headers=auth_header(new_access)).status_code == 200

    def test_refresh_token_is_not_rotated(self, client, register):
        body = register()
        for _ in range(2):
            resp = client.post("/api/auth/refresh", json={"refreshToken": body["refreshToken"]})
            assert resp.status_code == 200

    def test_missing_token(self, client):
        resp = client.post("/api/auth/refresh", json={})
        assert resp.status_code == 400
        assert client.post("/api/auth/refresh").status_code == 400

    def test_invalid_token(self, client):
        resp = client.post("/api/auth/refresh", json={"refreshToken": "garbage"})
        assert resp.status_code == 403

    def test_access_token_is_rejected(self, client, register):
        body = register()
        resp = client.post("/api/auth/refresh", json={"refreshToken": body["accessToken"]})
        assert resp.status_code == 403

    def test_scenario_register_login_rotates_refresh_tokens(self, client, register):
        r1 = register(email="a@x.com", password="pw1234", cityId="1")["refreshToken"]
        resp = login(client, "a@x.com", "pw1234")
        assert resp.status_code == 200
        r2 = resp.get_json()["refreshToken"]

        stale = client.post("/api/auth/refresh", json={"refreshToken": r1})
        assert stale.status_code == 403
        assert stale.get_json() == {"error": "Refresh token has been revoked"}
        assert client.post("/api/auth/refresh", json={"refreshToken": r2}).status_code == 200


class TestLogout:

    def test_logout_revokes_refresh_token(self, client, register):
        body = register()
        resp = client.post(
            "/api/auth/logout",
            json={"refreshToken": body["refreshToken"]},
            headers=auth_header(body["accessToken"]),
        )
        assert resp.status_code == 200
        assert resp.get_json() == {"message": "Logged out successfully"}
        again = client.post("/api/auth/refresh", json={"refreshToken": body["refreshToken"]})
        assert again.status_code == 403

    def test_logout_twice_is_idempotent(self, client, register):
        body = register()
        for _ in range(2):
            resp = client.post(
                "/api/auth/logout",
                json={"refreshToken": body["refreshToken"]},
                headers=auth_header(body["accessToken"]),
            )
            assert resp.status_code == 200

    def test_logout_without_refresh_token(self, client, register):
        body = register()
        resp = client.post("/api/auth/logout", headers=auth_header(body["accessToken"]))
        assert resp.status_code == 200
        # nothing was revoked
        assert client.post("/api/auth/refresh", json={"refreshToken": body["refreshToken"]}).status_code == 200

    def test_logout_cannot_revoke_someone_elses_token(self, client, register):
        alice = register("alice@x.com")
        bob = register("bob@x.com")
        client.post(
            "/api/auth/logout",
            json={"refreshToken": alice["refreshToken"]},
            headers=auth_header(bob["accessToken"]),
        )
        assert client.post("/api/auth/refresh", json={"refreshToken": alice["refreshToken"]}).status_code == 200

    def test_logout_requires_auth(self, client):
        assert client.post("/api/auth/logout").status_code == 401


class TestMe:

    def test_me(self, client, register):
        body = register()
        resp = client.get("/api/auth/me", headers=auth_header(body["accessToken"]))
        assert resp.status_code == 200
        assert resp.get_json() == body["user"]

    def test_me_without_token(self, client):
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401
        assert "error" in resp.get_json()

    def test_me_with_bad_token(self, client):
        resp = client.get("/api/auth/me", headers=auth_header("garbage"))
        assert resp.status_code == 403

    def test_me_with_refresh_token(self, client, register):
        body = register()
        resp = client.get("/api/auth/me", headers=auth_header(body["refreshToken"]))
        assert resp.status_code == 403

    def test_me_after_user_deleted(self, client, register):
        body = register()
        client.delete("/api/users/1", headers=auth_header(body["accessToken"]))
        resp = client.get("/api/auth/me", headers=auth_header(body["accessToken"]))
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "User not found"}
