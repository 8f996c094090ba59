"""
Integration tests for authentication and the access gate over HTTP.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from userhub.database import Database
from userhub.kernel.activity import InMemoryActivityLog
from userhub.kernel.identity import TokenClaims, TokenService
from userhub.kernel.repositories import SqlUserRepository


async def _register(client: AsyncClient, payload: dict):
    return await client.post("/api/auth/register", json=payload)


async def _login(client: AsyncClient, email: str = "ana@x.com", password: str = "secret1"):
    return await client.post("/api/auth/login", json={"email": email, "password": password})


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_login_list(self, client: AsyncClient, ana_payload: dict):
        response = await _register(client, ana_payload)
        assert response.status_code == 201
        assert response.json() == {"message": "Usuário criado com sucesso"}

        response = await _login(client)
        assert response.status_code == 200
        body = response.json()
        assert body["token"]
        assert body["user"]["email"] == "ana@x.com"
        assert body["user"]["firstName"] == "Ana"
        assert body["user"]["birthDay"] == "1990-01-01"
        assert "password" not in body["user"]

        response = await client.get(
            "/api/users", headers={"Authorization": f"Bearer {body['token']}"}
        )
        assert response.status_code == 200
        users = response.json()
        assert [u["email"] for u in users] == ["ana@x.com"]
        assert all("password" not in u for u in users)

    @pytest.mark.asyncio
    async def test_register_does_not_return_token(self, client: AsyncClient, ana_payload: dict):
        response = await _register(client, ana_payload)

        assert "token" not in response.json()

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client: AsyncClient, ana_payload: dict):
        await _register(client, ana_payload)

        response = await _register(client, {**ana_payload, "firstName": "Outra"})

        assert response.status_code == 400
        assert response.json() == {"message": "E-mail já cadastrado"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field, value, message",
        [
            ("firstName", "", "Nome é obrigatório"),
            ("lastName", "", "Sobrenome é obrigatório"),
            ("birthDay", "", "Data de nascimento é obrigatória"),
            ("email", "ana", "E-mail inválido"),
            ("password", "123", "Senha deve ter pelo menos 6 caracteres"),
        ],
    )
    async def test_validation_messages(
        self, client: AsyncClient, ana_payload: dict, field: str, value: str, message: str
    ):
        response = await _register(client, {**ana_payload, field: value})

        assert response.status_code == 400
        assert response.json() == {"message": message}

    @pytest.mark.asyncio
    async def test_missing_field(self, client: AsyncClient, ana_payload: dict):
        payload = {k: v for k, v in ana_payload.items() if k != "firstName"}

        response = await _register(client, payload)

        assert response.status_code == 400
        assert response.json() == {"message": "Nome é obrigatório"}


class TestLogin:
    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(
        self, client: AsyncClient, ana_payload: dict
    ):
        await _register(client, ana_payload)

        wrong_password = await _login(client, password="wrong-one")
        unknown_email = await _login(client, email="nobody@x.com")

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"message": "Credenciais inválidas"}
        assert wrong_password.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_login_token_is_accepted_by_gate(
        self, client: AsyncClient, ana_payload: dict, token_service: TokenService
    ):
        await _register(client, ana_payload)

        token = (await _login(client)).json()["token"]

        claims = token_service.verify(token)
        assert claims.email == "ana@x.com"

    @pytest.mark.asyncio
    async def test_missing_password(self, client: AsyncClient):
        response = await client.post("/api/auth/login", json={"email": "ana@x.com"})

        assert response.status_code == 400
        assert response.json() == {"message": "Senha é obrigatória"}


class TestAccessGate:
    @pytest.mark.asyncio
    async def test_no_token(self, client: AsyncClient):
        response = await client.get("/api/users")

        assert response.status_code == 401
        assert response.json() == {"message": "Token não fornecido"}

    @pytest.mark.asyncio
    async def test_non_bearer_scheme(self, client: AsyncClient):
        response = await client.get("/api/users", headers={"Authorization": "Basic YWxhZGRpbjpvcGVu"})

        assert response.status_code == 401
        assert response.json() == {"message": "Token não fornecido"}

    @pytest.mark.asyncio
    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get("/api/users", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 403
        assert response.json() == {"message": "Token inválido"}

    @pytest.mark.asyncio
    async def test_expired_token(self, client: AsyncClient, token_service: TokenService):
        issued = datetime.now(timezone.utc) - timedelta(days=8)
        token = token_service.issue(TokenClaims(id="u-1", email="ana@x.com"), now=issued)

        response = await client.get("/api/users", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403
        assert response.json() == {"message": "Token inválido"}

    @pytest.mark.asyncio
    async def test_token_signed_with_other_secret(self, client: AsyncClient):
        other = TokenService(secret_key="a-completely-different-secret-0123456789")
        token = other.issue(TokenClaims(id="u-1", email="ana@x.com"))

        response = await client.get("/api/users", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/api/users/some-id"),
            ("POST", "/api/users"),
            ("PUT", "/api/users/some-id"),
            ("DELETE", "/api/users/some-id"),
            ("GET", "/api/activity"),
        ],
    )
    async def test_every_directory_route_is_gated(self, client: AsyncClient, method: str, path: str):
        response = await client.request(method, path)

        assert response.status_code == 401


class TestHealth:
    @pytest.mark.asyncio
    async def test_health_is_public(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": "1.0.0"}

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    @pytest.mark.asyncio
    async def test_unknown_route_uses_message_body(self, client: AsyncClient):
        response = await client.get("/api/nothing-here")

        assert response.status_code == 404
        assert "message" in response.json()


class TestPrimaryStoreFailure:
    @pytest.mark.asyncio
    async def test_commit_failure_is_reported_as_500(
        self,
        app: FastAPI,
        database: Database,
        activity_log: InMemoryActivityLog,
        ana_payload: dict,
        monkeypatch,
    ):
        async def failing_commit(session):
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(AsyncSession, "commit", failing_commit)
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.post("/api/auth/register", json=ana_payload)
        monkeypatch.undo()

        assert response.status_code == 500
        assert response.json() == {"message": "Erro interno do servidor"}
        async with database.session_maker() as session:
            assert await SqlUserRepository(session).get_all() == []
        assert await activity_log.recent() == []

    @pytest.mark.asyncio
    async def test_login_right_after_register(self, client: AsyncClient, ana_payload: dict):
        assert (await _register(client, ana_payload)).status_code == 201

        response = await _login(client)

        assert response.status_code == 200
