from pydantic import ConfigDict

from app.models.camel_model import CamelModel


class EditDraft(CamelModel):
    title: str | None = None
    content: str | None = None
    published: bool | None = None

    model_config = ConfigDict(extra="ignore")


class SavePost(CamelModel):
    published: bool | None = None

    model_config = ConfigDict(extra="ignore")
