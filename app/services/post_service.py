import uuid
from typing import Any

import pendulum
from aws_lambda_powertools import Logger

from app.exceptions import PostNotFoundException
from app.models.post import Post
from app.models.response import Page
from app.models.response import Post as PostResponse
from app.repositories.post_repository import PostRepository

IMMUTABLE_FIELDS = {"id", "owner_id", "created_at"}
SUMMARY_FIELDS = ["id", "title", "created_at", "published", "views"]


class PostService:
    ERROR_POST_NOT_FOUND = "The requested post was not found"

    def __init__(self, repository: PostRepository):
        self._logger = Logger(utc=True)
        self._repo = repository

    def get_post_by_uuid(self, post_uuid: str, owner_id: str) -> Post:
        item = self._repo.get_post_by_uuid(post_uuid)
        if not item or item.get("owner_id") != owner_id:
            self._logger.warning(f"Post not found: {post_uuid=} {owner_id=}")
            raise PostNotFoundException(self.ERROR_POST_NOT_FOUND)
        return Post(**item)

    def create_post(self, owner_id: str, data: dict[str, Any]) -> Post:
        now = pendulum.now("UTC").to_iso8601_string()
        post = Post(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            title=data["title"],
            content=data["content"],
            published=data.get("published", False),
            created_at=now,
            updated_at=now,
        )
        self._repo.create_post(post.model_dump())
        self._logger.info(f"Post created: {post.id=}")
        return post

    def upsert_post(
        self, owner_id: str, data: dict[str, Any], post_uuid: str | None = None
    ) -> Post:
        if post_uuid is None:
            return self.create_post(owner_id, data)
        existing = self._repo.get_post_by_uuid(post_uuid)
        now = pendulum.now("UTC").to_iso8601_string()
        post = Post(
            id=post_uuid,
            owner_id=owner_id,
            title=data["title"],
            content=data["content"],
            published=data.get("published", False),
            views=existing.get("views", 0) if existing else 0,
            created_at=existing["created_at"] if existing else now,
            updated_at=now,
        )
        if not self._repo.upsert_post(post.model_dump()):
            raise PostNotFoundException(self.ERROR_POST_NOT_FOUND)
        self._logger.info(f"Post upserted: {post.id=}")
        return post

    def delete_post(self, post_uuid: str, owner_id: str):
        if not self._repo.delete_post(post_uuid, owner_id):
            self._logger.warning(f"Post not found: {post_uuid=} {owner_id=}")
            raise PostNotFoundException(self.ERROR_POST_NOT_FOUND)
        self._logger.info(f"Post deleted: {post_uuid=}")

    def get_post(self, post_uuid: str, owner_id: str) -> PostResponse:
        return PostResponse(**self.get_post_by_uuid(post_uuid, owner_id).model_dump())

    def get_posts(self, owner_id: str) -> Page:
        posts = self._repo.get_posts_by_owner(owner_id, SUMMARY_FIELDS)
        return Page(posts=[PostResponse(**post) for post in posts])

    def update_post(self, post_uuid: str, owner_id: str, data: dict[str, Any]) -> Post:
        changes = {k: v for k, v in data.items() if k not in IMMUTABLE_FIELDS}
        changes["updated_at"] = pendulum.now("UTC").to_iso8601_string()
        item = self._repo.update_post(post_uuid, owner_id, changes)
        if item is None:
            self._logger.warning(f"Post not found: {post_uuid=} {owner_id=}")
            raise PostNotFoundException(self.ERROR_POST_NOT_FOUND)
        self._logger.info(f"Post updated: {post_uuid=}")
        return Post(**item)
