"""Auth and CORS middleware tests."""

from unittest.mock import MagicMock

import falcon
import falcon.asgi
import pytest
from falcon.testing import TestClient

from lumbertrack.infrastructure.auth.keycloak_provider import OIDCUser
from lumbertrack.interfaces.api.middleware.auth import AuthMiddleware
from lumbertrack.interfaces.api.middleware.cors import CORSMiddleware


class _WhoAmIResource:
    async def on_get(self, req, resp):
        user = req.context.user
        resp.media = {"user_id": user.user_id if user else None}
        resp.status = falcon.HTTP_200


def _client(*middleware) -> TestClient:
    app = falcon.asgi.App(middleware=list(middleware))
    app.add_route("/whoami", _WhoAmIResource())
    return TestClient(app)


def test_bearer_token_is_not_trusted_without_keycloak() -> None:
    client = _client(AuthMiddleware())
    result = client.simulate_get("/whoami", headers={"Authorization": "Bearer clerk-2"})
    assert result.json == {"user_id": None}


@pytest.mark.parametrize("header", [None, "Basic abc", "Bearer   "])
def test_missing_token_leaves_no_user(header) -> None:
    client = _client(AuthMiddleware())
    headers = {"Authorization": header} if header else {}
    assert client.simulate_get("/whoami", headers=headers).json == {"user_id": None}


def test_keycloak_introspection_resolves_subject() -> None:
    keycloak = MagicMock()
    keycloak.decode_token.return_value = OIDCUser(
        user_id="sub-1", email="a@yard.test", username="a", realm_roles=[]
    )
    client = _client(AuthMiddleware(keycloak))
    result = client.simulate_get("/whoami", headers={"Authorization": "Bearer tok"})
    assert result.json == {"user_id": "sub-1"}
    keycloak.decode_token.assert_called_once_with("tok")


def test_inactive_keycloak_token_leaves_no_user() -> None:
    keycloak = MagicMock()
    keycloak.decode_token.return_value = None
    client = _client(AuthMiddleware(keycloak))
    result = client.simulate_get("/whoami", headers={"Authorization": "Bearer tok"})
    assert result.json == {"user_id": None}


def test_cors_echoes_listed_origin_only() -> None:
    client = _client(CORSMiddleware(["http://yard.test"]), AuthMiddleware())
    allowed = client.simulate_get("/whoami", headers={"Origin": "http://yard.test"})
    assert allowed.headers["Access-Control-Allow-Origin"] == "http://yard.test"
    other = client.simulate_get("/whoami", headers={"Origin": "http://evil.test"})
    assert "Access-Control-Allow-Origin" not in other.headers


def test_cors_preflight_allows_idempotency_key() -> None:
    client = _client(CORSMiddleware(["*"]))
    result = client.simulate_options("/whoami", headers={"Origin": "http://any.test"})
    assert result.status_code == 200
    assert result.headers["Access-Control-Allow-Origin"] == "*"
    assert "Idempotency-Key" in result.headers["Access-Control-Allow-Headers"]
