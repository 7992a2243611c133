import asyncio
import time
from collections.abc import Awaitable, Callable

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import HTTPException
from pydantic import ValidationError

from app.embeds import embed_kind, insert_embed
from app.exceptions import (
    DraftClearNotAllowedException,
    EmptyPostException,
    PostLoadException,
)
from app.models.editor import EditorState
from app.models.post import Draft, Post
from app.repositories.draft_repository import DraftRepository
from app.services.post_service import PostService

ERROR_CLEAR_NOT_ALLOWED = "Only an unsaved draft can be cleared"
ERROR_EMPTY_POST = "Title and content cannot be empty"
ERROR_LOADING_POST = "Error loading post"


class Debouncer:
    """Runs ``callback`` once no ``schedule`` call arrived for ``interval`` seconds.

    Every ``schedule`` cancels the pending timer handle before arming a new one,
    so superseded timers never fire. Callbacks that already started run to
    completion and are tracked until they finish.
    """

    def __init__(self, interval: float, callback: Callable[[], Awaitable[None]]):
        self._interval = interval
        self._callback = callback
        self._timer: asyncio.TimerHandle | None = None
        self._in_flight: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    @property
    def running(self) -> int:
        return len(self._in_flight)

    def schedule(self):
        self.cancel()
        self._timer = asyncio.get_running_loop().call_later(self._interval, self._fire)

    def cancel(self) -> bool:
        if self._timer is None:
            return False
        self._timer.cancel()
        self._timer = None
        return True

    def _fire(self):
        self._timer = None
        task = asyncio.create_task(self._callback())
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def wait(self):
        if self._in_flight:
            await asyncio.wait(list(self._in_flight))

    async def flush(self):
        if self.cancel():
            self._fire()
        await self.wait()


class EditorSession:
    """Editing state of one owner: draft loading, autosave and identity adoption.

    While the post has no id every write is a create and edits are mirrored to
    the owner's local draft slot. The first successful create assigns the id,
    clears the draft and turns every later write into an update of that id.

    Post writes run one at a time and read the state only once the previous
    write finished, so the last write always carries the latest edit. Draft
    slot writes are serialised the same way on their own lock.
    """

    def __init__(
        self,
        owner_id: str,
        post_service: PostService,
        draft_repository: DraftRepository,
        autosave_interval: float,
    ):
        self._logger = Logger(utc=True)
        self.owner_id = owner_id
        self.state = EditorState()
        self._post_service = post_service
        self._draft_repository = draft_repository
        self._autosave = Debouncer(autosave_interval, self._run_autosave)
        self._writing = asyncio.Lock()
        self._draft_lock = asyncio.Lock()

    @property
    def autosave_pending(self) -> bool:
        return self._autosave.pending

    @property
    def idle(self) -> bool:
        return not (
            self._autosave.pending
            or self._autosave.running
            or self._writing.locked()
            or self._draft_lock.locked()
        )

    async def _settle(self):
        self._autosave.cancel()
        await self._autosave.wait()

    async def load(self, post_id: str | None = None) -> bool:
        """Load the target to edit, returns True when a local draft was restored."""
        await self._settle()
        async with self._writing:
            return await self._load(post_id)

    async def _load(self, post_id: str | None) -> bool:
        self.state = EditorState()
        if post_id is None:
            value = await asyncio.to_thread(
                self._draft_repository.get_draft, self.owner_id
            )
            if value is None:
                return False
            try:
                draft = Draft.model_validate_json(value)
            except ValidationError:
                self._logger.warning(f"Ignoring unreadable draft {self.owner_id=}")
                return False
            self.state = EditorState(title=draft.title, content=draft.content)
            self._logger.info(f"Restored local draft {self.owner_id=}")
            return True
        try:
            post = await asyncio.to_thread(
                self._post_service.get_post_by_uuid, post_id, self.owner_id
            )
        except (BotoCoreError, ClientError) as e:
            self._logger.exception(f"Failed to load {post_id=}")
            raise PostLoadException(ERROR_LOADING_POST) from e
        self.state = EditorState(
            post_id=post.id,
            title=post.title,
            content=post.content,
            published=post.published,
            updated_at=post.updated_at,
        )
        return False

    async def edit(
        self,
        title: str | None = None,
        content: str | None = None,
        published: bool | None = None,
    ) -> EditorState:
        state = self.state
        if title is not None:
            state.title = title
        if content is not None:
            state.content = content
        if published is not None:
            state.published = published
        state.version += 1
        if title is not None or content is not None:
            if state.is_savable:
                self._autosave.schedule()
            else:
                self._autosave.cancel()
        if not state.is_identified:
            await self._write_local_draft()
        return state

    async def insert_embed(
        self, content_type: str, url: str, index: int | None = None
    ) -> EditorState:
        content = insert_embed(self.state.content, embed_kind(content_type), url, index)
        return await self.edit(content=content)

    async def save(self, published: bool | None = None) -> Post:
        if published is not None and published != self.state.published:
            self.state.published = published
            self.state.version += 1
        if not self.state.is_savable:
            raise EmptyPostException(ERROR_EMPTY_POST)
        self._autosave.cancel()
        await self._autosave.wait()
        post = await self._persist()
        if post is None:
            raise EmptyPostException(ERROR_EMPTY_POST)
        return post

    async def clear_draft(self):
        await self._settle()
        async with self._writing:
            if self.state.is_identified:
                raise DraftClearNotAllowedException(ERROR_CLEAR_NOT_ALLOWED)
            async with self._draft_lock:
                await asyncio.to_thread(
                    self._draft_repository.delete_draft, self.owner_id
                )
            self.state = EditorState()
        self._logger.info(f"Draft cleared {self.owner_id=}")

    async def flush(self):
        await self._autosave.flush()

    async def close(self):
        await self.flush()
        async with self._writing:
            self._logger.debug(f"Editor session closed {self.owner_id=}")

    async def _write_local_draft(self):
        async with self._draft_lock:
            # adoption already cleared the slot
            if self.state.is_identified:
                return
            draft = Draft(title=self.state.title, content=self.state.content)
            try:
                await asyncio.to_thread(
                    self._draft_repository.put_draft,
                    self.owner_id,
                    draft.model_dump_json(),
                )
            except (BotoCoreError, ClientError):
                self._logger.exception(f"Failed to write local draft {self.owner_id=}")

    async def _run_autosave(self):
        try:
            await self._persist()
        except (HTTPException, BotoCoreError, ClientError):
            self._logger.exception(
                f"Autosave failed {self.owner_id=} post_id={self.state.post_id}"
            )

    async def _persist(self) -> Post | None:
        async with self._writing:
            state = self.state
            if not state.is_savable:
                return None
            version = state.version
            data = {
                "title": state.title,
                "content": state.content,
                "published": state.published,
            }
            if state.post_id is not None:
                post = await asyncio.to_thread(
                    self._post_service.update_post, state.post_id, self.owner_id, data
                )
            else:
                post = await asyncio.to_thread(
                    self._post_service.upsert_post, self.owner_id, data
                )
                await self._adopt(state, post)
            self._record(state, post, version)
            return post

    async def _adopt(self, state: EditorState, post: Post):
        state.post_id = post.id
        self._logger.info(f"Draft identified as post id={post.id} {self.owner_id=}")
        async with self._draft_lock:
            try:
                await asyncio.to_thread(
                    self._draft_repository.delete_draft, self.owner_id
                )
            except (BotoCoreError, ClientError):
                self._logger.exception(f"Failed to clear local draft {self.owner_id=}")

    def _record(self, state: EditorState, post: Post, version: int):
        if version < state.saved_version:
            self._logger.debug(f"Ignoring stale write response {version=}")
            return
        state.saved_version = version
        state.updated_at = post.updated_at


class EditorSessionRegistry:
    """One editor session per owner.

    Sessions that stayed idle for ``session_ttl`` seconds are dropped on the
    next lookup. A session with a pending or running write is never dropped.
    """

    def __init__(
        self,
        post_service: PostService,
        draft_repository: DraftRepository,
        autosave_interval: float,
        session_ttl: float = 900,
    ):
        self._logger = Logger(utc=True)
        self._post_service = post_service
        self._draft_repository = draft_repository
        self._autosave_interval = autosave_interval
        self._session_ttl = session_ttl
        self._sessions: dict[str, EditorSession] = {}
        self._last_used: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, owner_id: str) -> EditorSession:
        self.evict_idle()
        if owner_id not in self._sessions:
            self._sessions[owner_id] = EditorSession(
                owner_id,
                self._post_service,
                self._draft_repository,
                self._autosave_interval,
            )
        self._last_used[owner_id] = time.monotonic()
        return self._sessions[owner_id]

    def evict_idle(self) -> int:
        now = time.monotonic()
        expired = [
            owner_id
            for owner_id, session in self._sessions.items()
            if session.idle and now - self._last_used[owner_id] >= self._session_ttl
        ]
        for owner_id in expired:
            del self._sessions[owner_id]
            del self._last_used[owner_id]
        if expired:
            self._logger.debug(f"Evicted idle editor sessions count={len(expired)}")
        return len(expired)

    async def close(self):
        for session in self._sessions.values():
            await session.close()
        self._sessions.clear()
        self._last_used.clear()
