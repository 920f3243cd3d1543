"""
T-Image API: HTTP Endpoint Tests
===================================

What:  End-to-end request tests through FastAPI with a real (SQLite)
       database per test.

What we test:
    ✅ Signup/login flow, duplicate usernames, identical login failures
    ✅ Password reset changes which password authenticates
    ✅ Basic auth failures are 401 with WWW-Authenticate
    ✅ Image upload/list/get/delete including the ownership rule
    ✅ 422 on structural validation errors
    ✅ Timestamps render identically on upload and on later reads
    ✅ bcrypt work does not stall the event loop
"""

import asyncio
from unittest.mock import patch

import pytest
from sqlalchemy import func, select

from timage.config import settings
from timage.models.user import User

SUNSET = {"title": "Sunset", "url": "https://x.com/a.jpg"}


async def _signup(client, username: str, password: str) -> dict:
    response = await client.post(
        "/api/auth/signup", json={"username": username, "password": password}
    )
    assert response.status_code == 201
    return response.json()


class TestAuthEndpoints:

    @pytest.mark.asyncio
    async def test_signup_then_login(self, test_client):
        created = await _signup(test_client, "alice", "secret1")

        assert created["username"] == "alice"
        assert len(created["id"]) == 24
        assert "password" not in created
        assert "passwordHash" not in created

        response = await test_client.post(
            "/api/auth/login", json={"username": "alice", "password": "secret1"}
        )
        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_signup_trims_username(self, test_client):
        created = await _signup(test_client, "  alice  ", "secret1")
        assert created["username"] == "alice"

    @pytest.mark.asyncio
    async def test_duplicate_signup_conflict(self, test_client, session_factory):
        first = await _signup(test_client, "alice", "secret1")

        response = await test_client.post(
            "/api/auth/signup", json={"username": "alice", "password": "other"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "conflict"
        assert body["message"] == "Username alice already exists"

        # The original account still logs in with its own password
        login = await test_client.post(
            "/api/auth/login", json={"username": "alice", "password": "secret1"}
        )
        assert login.json()["id"] == first["id"]

        async with session_factory() as session:
            count = await session.scalar(select(func.count()).select_from(User))
        assert count == 1

    @pytest.mark.asyncio
    async def test_login_failures_are_indistinguishable(self, test_client):
        await _signup(test_client, "alice", "secret1")

        wrong_password = await test_client.post(
            "/api/auth/login", json={"username": "alice", "password": "nope"}
        )
        unknown_user = await test_client.post(
            "/api/auth/login", json={"username": "mallory", "password": "nope"}
        )

        assert wrong_password.status_code == unknown_user.status_code == 400
        a, b = wrong_password.json(), unknown_user.json()
        a.pop("request_id")
        b.pop("request_id")
        assert a == b == {"error": "invalid_credentials", "message": "Invalid username or password"}

    @pytest.mark.asyncio
    async def test_login_does_not_block_other_requests(self, test_client):
        """Concurrent logins at production cost leave the event loop responsive."""
        gaps = []

        async def ticker(stop: asyncio.Event):
            loop = asyncio.get_running_loop()
            while not stop.is_set():
                started = loop.time()
                await asyncio.sleep(0.01)
                gaps.append(loop.time() - started)

        with patch.object(settings, "bcrypt_rounds", 12):
            await _signup(test_client, "alice", "secret1")

            stop = asyncio.Event()
            ticking = asyncio.create_task(ticker(stop))
            responses = await asyncio.gather(*(
                test_client.post(
                    "/api/auth/login", json={"username": "alice", "password": "secret1"}
                )
                for _ in range(4)
            ))
            stop.set()
            await ticking

        assert [r.status_code for r in responses] == [200] * 4
        assert gaps
        assert max(gaps) < 0.1

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"username": "alice"},
            {"username": "", "password": "secret1"},
            {"username": "   ", "password": "secret1"},
            {"username": "a" * 31, "password": "secret1"},
            {"username": "alice", "password": "p" * 31},
        ],
    )
    @pytest.mark.asyncio
    async def test_signup_invalid_input(self, test_client, body):
        response = await test_client.post("/api/auth/signup", json=body)

        assert response.status_code == 422
        payload = response.json()
        assert payload["error"] == "validation_error"
        assert payload["details"]["errors"]

    @pytest.mark.asyncio
    async def test_reset_password(self, test_client, basic_auth):
        await _signup(test_client, "alice", "secret1")

        response = await test_client.patch(
            "/api/auth/reset-password",
            json={"oldPassword": "secret1", "newPassword": "secret2"},
            headers=basic_auth("alice", "secret1"),
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Password updated successfully"}

        old = await test_client.post(
            "/api/auth/login", json={"username": "alice", "password": "secret1"}
        )
        new = await test_client.post(
            "/api/auth/login", json={"username": "alice", "password": "secret2"}
        )
        assert old.status_code == 400
        assert new.status_code == 200

    @pytest.mark.asyncio
    async def test_reset_password_wrong_old_password(self, test_client, basic_auth):
        await _signup(test_client, "alice", "secret1")

        response = await test_client.patch(
            "/api/auth/reset-password",
            json={"oldPassword": "wrong", "newPassword": "secret2"},
            headers=basic_auth("alice", "secret1"),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid old password"

        login = await test_client.post(
            "/api/auth/login", json={"username": "alice", "password": "secret1"}
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_reset_password_requires_auth(self, test_client):
        response = await test_client.patch(
            "/api/auth/reset-password",
            json={"oldPassword": "secret1", "newPassword": "secret2"},
        )
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Basic"
        assert response.json()["error"] == "unauthorized"


class TestBasicAuthentication:

    @pytest.mark.parametrize(
        "headers",
        [
            {},
            {"Authorization": "Bearer abc"},
            {"Authorization": "Basic %%%"},
        ],
    )
    @pytest.mark.asyncio
    async def test_malformed_credentials_unauthorized(self, test_client, headers):
        response = await test_client.post("/api/images", json=SUNSET, headers=headers)

        assert response.status_code == 401
        assert response.json()["message"] == "Unauthorized"

    @pytest.mark.asyncio
    async def test_wrong_password_unauthorized(self, test_client, basic_auth):
        await _signup(test_client, "alice", "secret1")

        response = await test_client.post(
            "/api/images", json=SUNSET, headers=basic_auth("alice", "wrong")
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_user_unauthorized(self, test_client, basic_auth):
        response = await test_client.post(
            "/api/images", json=SUNSET, headers=basic_auth("ghost", "secret1")
        )
        assert response.status_code == 401


class TestImageEndpoints:

    @pytest.mark.asyncio
    async def test_alice_and_bob_scenario(self, test_client, basic_auth):
        """Upload as alice, bob cannot delete, alice can, then it is gone."""
        alice = await _signup(test_client, "alice", "secret1")
        await _signup(test_client, "bob", "secret2")

        upload = await test_client.post(
            "/api/images", json=SUNSET, headers=basic_auth("alice", "secret1")
        )
        assert upload.status_code == 201
        image = upload.json()
        assert image["authorId"] == alice["id"]
        assert image["title"] == "Sunset"
        assert image["url"] == "https://x.com/a.jpg"
        assert len(image["id"]) == 24
        assert "createdAt" in image and "updatedAt" in image

        forbidden = await test_client.delete(
            f"/api/images/{image['id']}", headers=basic_auth("bob", "secret2")
        )
        assert forbidden.status_code == 403
        assert forbidden.json()["message"] == "Forbidden from deleting"

        still_there = await test_client.get(f"/api/images/{image['id']}")
        assert still_there.status_code == 200

        deleted = await test_client.delete(
            f"/api/images/{image['id']}", headers=basic_auth("alice", "secret1")
        )
        assert deleted.status_code == 204
        assert deleted.content == b""

        gone = await test_client.get(f"/api/images/{image['id']}")
        assert gone.status_code == 404
        assert gone.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_list_images_in_upload_order(self, test_client, basic_auth):
        await _signup(test_client, "alice", "secret1")
        headers = basic_auth("alice", "secret1")

        assert (await test_client.get("/api/images")).json() == []

        for i in range(3):
            response = await test_client.post(
                "/api/images",
                json={"title": f"Image {i}", "url": f"https://x.com/{i}.jpg"},
                headers=headers,
            )
            assert response.status_code == 201

        listing = await test_client.get("/api/images")
        assert listing.status_code == 200
        assert [img["title"] for img in listing.json()] == ["Image 0", "Image 1", "Image 2"]

    @pytest.mark.asyncio
    async def test_timestamps_identical_across_reads(self, test_client, basic_auth):
        await _signup(test_client, "alice", "secret1")
        upload = await test_client.post(
            "/api/images", json=SUNSET, headers=basic_auth("alice", "secret1")
        )
        image = upload.json()

        fetched = (await test_client.get(f"/api/images/{image['id']}")).json()
        listed = (await test_client.get("/api/images")).json()[0]

        for key in ("createdAt", "updatedAt"):
            assert fetched[key] == image[key]
            assert listed[key] == image[key]
        assert image["createdAt"].endswith("Z")

    @pytest.mark.parametrize(
        "duplicate",
        [
            {"title": "Sunset", "url": "https://x.com/other.jpg"},
            {"title": "Other", "url": "https://x.com/a.jpg"},
        ],
    )
    @pytest.mark.asyncio
    async def test_duplicate_title_or_url(self, test_client, basic_auth, duplicate):
        await _signup(test_client, "alice", "secret1")
        headers = basic_auth("alice", "secret1")
        await test_client.post("/api/images", json=SUNSET, headers=headers)

        response = await test_client.post("/api/images", json=duplicate, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "conflict"
        assert len((await test_client.get("/api/images")).json()) == 1

    @pytest.mark.parametrize(
        "body",
        [
            {"title": "Sunset"},
            {"title": "", "url": "https://x.com/a.jpg"},
            {"title": "t" * 31, "url": "https://x.com/a.jpg"},
            {"title": "Sunset", "url": "not a url"},
        ],
    )
    @pytest.mark.asyncio
    async def test_upload_invalid_input(self, test_client, basic_auth, body):
        await _signup(test_client, "alice", "secret1")

        response = await test_client.post(
            "/api/images", json=body, headers=basic_auth("alice", "secret1")
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_get_image_invalid_id_shape(self, test_client):
        response = await test_client.get("/api/images/short-id")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_get_unknown_image(self, test_client):
        response = await test_client.get("/api/images/" + "0" * 24)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown_image(self, test_client, basic_auth):
        await _signup(test_client, "alice", "secret1")

        response = await test_client.delete(
            "/api/images/" + "0" * 24, headers=basic_auth("alice", "secret1")
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_requires_auth(self, test_client):
        response = await test_client.delete("/api/images/" + "0" * 24)
        assert response.status_code == 401


class TestOperationalEndpoints:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/api/images", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_openapi_declares_basic_auth(self, test_client):
        response = await test_client.get("/openapi.json")

        schemes = response.json()["components"]["securitySchemes"]
        assert schemes["BasicAuth"] == {"type": "http", "scheme": "basic"}
