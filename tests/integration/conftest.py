import pytest
from fastapi.testclient import TestClient

from app.http_handler import app
from tests.helpers.utils import generate_jwt_token


@pytest.fixture
def test_client(initialize_posts_table) -> TestClient:
    with TestClient(app, raise_server_exceptions=True) as client:
        yield client


@pytest.fixture
def auth_headers(owner_id: str) -> dict[str, str]:
    token, _ = generate_jwt_token(pytest.jwt_secret, owner_id)
    return {"Authorization": f"Bearer {token}"}
