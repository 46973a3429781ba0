"""
End-to-end tests for registration and login.
"""

import pathlib

import pytest


def _count_uploads(settings) -> int:
    return len(list(pathlib.Path(settings.upload_dir).iterdir()))


class TestClientRegistration:
    @pytest.mark.asyncio
    async def test_register_client(self, client, client_payload):
        resp = await client.post("/api/register/client", json=client_payload)
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Client registered successfully"
        assert body["token"]
        user = body["user"]
        assert user["email"] == "ada@example.com"
        assert user["userType"] == "client"
        assert user["businessName"] == "Ada Ltd"
        assert "password" not in user and "passwordHash" not in user

    @pytest.mark.asyncio
    async def test_missing_field(self, client, client_payload):
        client_payload.pop("address")
        resp = await client.post("/api/register/client", json=client_payload)
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": "All fields are required"}

    @pytest.mark.asyncio
    async def test_duplicate_email_any_case(self, client, client_payload):
        assert (await client.post("/api/register/client", json=client_payload)).status_code == 201
        client_payload["email"] = "ADA@EXAMPLE.COM"
        resp = await client.post("/api/register/client", json=client_payload)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Email already registered"

    @pytest.mark.asyncio
    async def test_role_cannot_be_overridden(self, client, client_payload):
        client_payload["userType"] = "freelancer"
        resp = await client.post("/api/register/client", json=client_payload)
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    @pytest.mark.asyncio
    async def test_malformed_body(self, client):
        resp = await client.post(
            "/api/register/client",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["success"] is False


class TestFreelancerRegistration:
    @pytest.mark.asyncio
    async def test_register_freelancer(self, client, settings, freelancer_form, freelancer_files):
        resp = await client.post(
            "/api/register/freelancer", data=freelancer_form, files=freelancer_files()
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["token"]
        user = body["user"]
        assert user["userType"] == "freelancer"
        assert user["skills"] == "python, fastapi"
        assert user["experience"] == "5 years"
        assert user["profilePicture"].startswith("uploads/profilePicture-")
        assert user["resume"].startswith("uploads/resume-")
        assert "password" not in user

        served = await client.get(f"/{user['resume']}")
        assert served.status_code == 200
        assert served.content.startswith(b"%PDF")

    @pytest.mark.asyncio
    async def test_missing_resume_persists_nothing(self, client, settings, freelancer_form, freelancer_files):
        resp = await client.post(
            "/api/register/freelancer",
            data=freelancer_form,
            files=freelancer_files(resume=False),
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Profile picture and resume are required"
        assert _count_uploads(settings) == 0

        login = await client.post(
            "/api/login",
            json={"email": freelancer_form["email"], "password": freelancer_form["password"]},
        )
        assert login.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_resume_type(self, client, freelancer_form, freelancer_files):
        files = freelancer_files()
        files["resume"] = ("cv.png", b"png", "image/png")
        resp = await client.post("/api/register/freelancer", data=freelancer_form, files=files)
        assert resp.status_code == 400
        assert "PDF" in resp.json()["message"]

    @pytest.mark.asyncio
    async def test_oversize_picture(self, client, settings, freelancer_form, freelancer_files):
        files = freelancer_files()
        files["profilePicture"] = ("big.png", b"x" * (settings.max_upload_bytes + 1), "image/png")
        resp = await client.post("/api/register/freelancer", data=freelancer_form, files=files)
        assert resp.status_code == 400
        assert "too large" in resp.json()["message"]

    @pytest.mark.asyncio
    async def test_duplicate_email_leaves_no_files(self, client, settings, freelancer_form, freelancer_files):
        first = await client.post(
            "/api/register/freelancer", data=freelancer_form, files=freelancer_files()
        )
        assert first.status_code == 201
        freelancer_form["email"] = freelancer_form["email"].upper()
        second = await client.post(
            "/api/register/freelancer", data=freelancer_form, files=freelancer_files()
        )
        assert second.status_code == 400
        assert second.json()["message"] == "Email already registered"
        assert _count_uploads(settings) == 2


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_success(self, client, client_payload):
        await client.post("/api/register/client", json=client_payload)
        resp = await client.post(
            "/api/login",
            json={"email": "ADA@example.com", "password": client_payload["password"], "userType": "client"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Login successful"
        assert body["user"]["businessType"] == "Consulting"
        assert "password" not in body["user"]

    @pytest.mark.asyncio
    async def test_wrong_password_same_message_as_unknown_email(self, client, client_payload):
        await client.post("/api/register/client", json=client_payload)
        wrong = await client.post(
            "/api/login", json={"email": client_payload["email"], "password": "nope"}
        )
        unknown = await client.post(
            "/api/login", json={"email": "ghost@example.com", "password": "nope"}
        )
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()
        assert wrong.json()["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_role_hint_mismatch(self, client, client_payload):
        await client.post("/api/register/client", json=client_payload)
        resp = await client.post(
            "/api/login",
            json={"email": client_payload["email"], "password": client_payload["password"], "userType": "freelancer"},
        )
        assert resp.status_code == 401
        assert resp.json()["message"] == "This account is not registered as a freelancer"

    @pytest.mark.asyncio
    async def test_missing_credentials(self, client):
        resp = await client.post("/api/login", json={"email": "a@b.c"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Email and password are required"

    @pytest.mark.asyncio
    async def test_unknown_role_hint_not_echoed(self, client, client_payload):
        await client.post("/api/register/client", json=client_payload)
        resp = await client.post(
            "/api/login",
            json={"email": client_payload["email"], "password": client_payload["password"], "userType": "admin"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": "Invalid user type"}
