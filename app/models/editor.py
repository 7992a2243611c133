from app.models.camel_model import CamelModel


class EditorState(CamelModel):
    post_id: str | None = None
    title: str = ""
    content: str = ""
    published: bool = False
    version: int = 0
    saved_version: int = 0
    updated_at: str | None = None

    @property
    def is_identified(self) -> bool:
        return self.post_id is not None

    @property
    def is_savable(self) -> bool:
        return bool(self.title.strip() and self.content.strip())
