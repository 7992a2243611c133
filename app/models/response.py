from app.models.camel_model import CamelModel
from app.models.editor import EditorState


class Post(CamelModel):
    id: str | None = None
    title: str | None = None
    content: str | None = None
    published: bool | None = None
    views: int | None = None
    created_at: str | None = None
    updated_at: str | None = None


class Page(CamelModel):
    posts: list[Post]


class Upload(CamelModel):
    url: str


class Editor(CamelModel):
    state: EditorState
    restored: bool = False
    message: str | None = None
