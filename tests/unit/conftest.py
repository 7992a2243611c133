import uuid

import pendulum
import pytest

from app.jwt_bearer import JWTBearer
from app.models.auth import JWTToken
from app.repositories.draft_repository import DraftRepository
from app.repositories.post_repository import PostRepository
from app.services.auth_service import AuthService
from app.services.post_service import PostService
from app.settings import Settings


@pytest.fixture
def jwt_bearer() -> JWTBearer:
    return JWTBearer()


@pytest.fixture
def jwt_token(faker, owner_id: str) -> JWTToken:
    now = pendulum.now()
    return JWTToken(
        aud="authenticated",
        email=faker.email(),
        exp=now.add(years=1).int_timestamp,
        iat=now.int_timestamp,
        iss=pytest.auth_base_url,
        role="authenticated",
        session_id=str(uuid.uuid4()),
        sub=owner_id,
    )


@pytest.fixture
def post_repository(initialize_posts_table, settings: Settings) -> PostRepository:
    return PostRepository(settings)


@pytest.fixture
def draft_repository(initialize_posts_table, settings: Settings) -> DraftRepository:
    return DraftRepository(settings)


@pytest.fixture
def post_service(post_repository: PostRepository) -> PostService:
    return PostService(post_repository)


@pytest.fixture
def auth_service(settings: Settings) -> AuthService:
    return AuthService(settings)
