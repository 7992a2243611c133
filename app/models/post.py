from pydantic import BaseModel

from app.models.camel_model import CamelModel


class Draft(BaseModel):
    title: str = ""
    content: str = ""


class Post(CamelModel):
    id: str
    owner_id: str
    title: str
    content: str
    published: bool = False
    views: int = 0
    created_at: str
    updated_at: str | None = None
