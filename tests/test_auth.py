"""
Tests for authentication endpoints and token handling
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from app.core.security import create_access_token, get_password_hash, verify_password

from helpers import auth_headers, register


class TestAuthentication:
    """Test suite for authentication endpoints"""

    @pytest.mark.asyncio
    async def test_register_success(self, client: AsyncClient):
        """Test successful user registration"""
        data = await register(client, email="Amina@Example.com", otpMethod="sms")

        assert data["accessToken"]
        assert data["tokenType"] == "bearer"
        assert data["user"]["email"] == "amina@example.com"
        assert data["user"]["role"] == "user"
        assert data["user"]["otpMethod"] == "sms"
        assert "password" not in data["user"]
        assert "passwordHash" not in data["user"]

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client: AsyncClient):
        """Test registration with duplicate email, case-insensitively"""
        await register(client, email="dup@example.com")

        response = await client.post("/api/auth/register", json={
            "name": "Second",
            "email": "DUP@example.com",
            "password": "Secret123!",
        })

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_register_invalid_payloads(self, client: AsyncClient):
        """Invalid email, short password and bad phone are rejected with the error envelope"""
        base = {"name": "X", "email": "x@example.com", "password": "Secret123!"}

        for override in ({"email": "invalid-email"}, {"password": "123"}, {"phone": "call-me"}):
            response = await client.post("/api/auth/register", json={**base, **override})
            assert response.status_code == 422
            body = response.json()
            assert body["success"] is False
            assert body["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient):
        await register(client, email="login@example.com", password="Secret123!")

        response = await client.post("/api/auth/login", json={
            "email": "login@example.com",
            "password": "Secret123!",
        })

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "login@example.com"

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient):
        await register(client, email="login2@example.com", password="Secret123!")

        response = await client.post("/api/auth/login", json={
            "email": "login2@example.com",
            "password": "WrongPass1!",
        })

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, client: AsyncClient):
        response = await client.post("/api/auth/login", json={
            "email": "ghost@example.com",
            "password": "whatever",
        })

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


class TestProfile:

    @pytest.mark.asyncio
    async def test_get_profile(self, client: AsyncClient, attendee, attendee_headers):
        response = await client.get("/api/auth/profile", headers=attendee_headers)

        assert response.status_code == 200
        assert response.json()["id"] == attendee["user"]["id"]

    @pytest.mark.asyncio
    async def test_update_profile(self, client: AsyncClient, attendee_headers):
        response = await client.put(
            "/api/auth/profile",
            json={"name": "Renamed", "phone": "254 700 000 000", "otpMethod": "sms"},
            headers=attendee_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Renamed"
        assert body["phone"] == "254700000000"
        assert body["otpMethod"] == "sms"

    @pytest.mark.asyncio
    async def test_tickets_start_empty(self, client: AsyncClient, attendee_headers):
        response = await client.get("/api/auth/tickets", headers=attendee_headers)

        assert response.status_code == 200
        assert response.json() == []


class TestTokens:

    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/auth/profile")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NO_TOKEN"

    @pytest.mark.asyncio
    async def test_malformed_token(self, client: AsyncClient):
        response = await client.get("/api/auth/profile", headers={"Authorization": "Bearer not.a.jwt"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    @pytest.mark.asyncio
    async def test_expired_token(self, client: AsyncClient, attendee):
        token = create_access_token(attendee["user"]["id"], expires_delta=timedelta(seconds=-10))

        response = await client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_EXPIRED"

    @pytest.mark.asyncio
    async def test_token_for_deleted_user(self, client: AsyncClient):
        token = create_access_token("no-such-user")

        response = await client.get("/api/auth/profile", headers=auth_headers({"accessToken": token}))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_INVALID"

    def test_password_hashing(self):
        hashed = get_password_hash("Secret123!")

        assert hashed != "Secret123!"
        assert verify_password("Secret123!", hashed)
        assert not verify_password("secret123!", hashed)
