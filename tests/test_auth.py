"""Tests for authentication helpers and endpoints."""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from jose import jwt

from invoicebox.config import settings
from invoicebox.services.auth import (
    ALGORITHM,
    create_access_token,
    get_current_user,
    get_password_hash,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_and_verify(self) -> None:
        hashed = get_password_hash("correct horse battery staple")
        assert hashed != "correct horse battery staple"
        assert verify_password("correct horse battery staple", hashed)
        assert not verify_password("wrong", hashed)


class TestTokens:
    def test_access_token_claims(self) -> None:
        token = create_access_token({"sub": "vendor@example.com"}, timedelta(minutes=5))
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        assert payload["sub"] == "vendor@example.com"
        assert "exp" in payload
        assert "jti" in payload

    def test_tokens_are_unique(self) -> None:
        assert create_access_token({"sub": "a"}) != create_access_token({"sub": "a"})

    @pytest.mark.asyncio
    async def test_missing_or_invalid_token_yields_no_user(self) -> None:
        assert await get_current_user(None) is None
        assert await get_current_user("not-a-jwt") is None


class TestEndpoints:
    @pytest.mark.asyncio
    async def test_health(self, anonymous_client: AsyncClient) -> None:
        response = await anonymous_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_me(self, client: AsyncClient, user) -> None:
        response = await client.get("/api/auth/me")
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "vendor@example.com"
        assert data["company_name"] == "Vendor SRL"
        assert data["plan"] == "FREE"

    @pytest.mark.asyncio
    async def test_me_unauthenticated(self, anonymous_client: AsyncClient) -> None:
        response = await anonymous_client.get("/api/auth/me")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_with_bad_token(self, anonymous_client: AsyncClient) -> None:
        response = await anonymous_client.get(
            "/api/auth/me", headers={"Authorization": "Bearer garbage"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_login_failure(self, anonymous_client: AsyncClient) -> None:
        with patch(
            "invoicebox.routers.auth.authenticate_user", AsyncMock(return_value=None)
        ):
            response = await anonymous_client.post(
                "/api/auth/token",
                data={"username": "vendor@example.com", "password": "wrong"},
            )
        assert response.status_code == 401
        assert response.json()["detail"] == "Incorrect email or password"

    @pytest.mark.asyncio
    async def test_login_success(self, anonymous_client: AsyncClient, user) -> None:
        with patch(
            "invoicebox.routers.auth.authenticate_user", AsyncMock(return_value=user)
        ):
            response = await anonymous_client.post(
                "/api/auth/token",
                data={"username": "vendor@example.com", "password": "secret"},
            )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == settings.token_expire_minutes * 60
        payload = jwt.decode(data["access_token"], settings.secret_key, algorithms=[ALGORITHM])
        assert payload["sub"] == "vendor@example.com"
        assert user.last_login is not None
        assert user.save_calls == 1
