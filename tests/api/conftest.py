"""Fixtures for API tests."""

import falcon.asgi
import pytest
from falcon.testing import TestClient

from lumbertrack.interfaces.api.resources.health import HealthResource
from lumbertrack.main import add_error_handlers, add_routes


class _TestUser:
    user_id = "test-user-1"


class AuthBypassMiddleware:
    """Middleware that sets context.user for testing.

    Requests carrying ``X-Test-Anonymous`` are left without a user.
    """

    async def process_request(self, req, resp):
        req.context.user = None if req.get_header("X-Test-Anonymous") else _TestUser()


@pytest.fixture
def app(uow_factory, mock_permission_checker):
    """Falcon ASGI app with every API route over the in-memory store."""
    app = falcon.asgi.App(middleware=[AuthBypassMiddleware()])
    add_error_handlers(app)
    add_routes(app, uow_factory, mock_permission_checker, HealthResource())
    return app


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    return TestClient(app)
