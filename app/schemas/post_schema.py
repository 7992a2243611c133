from pydantic import ConfigDict, constr

from app.models.camel_model import CamelModel


class CreatePost(CamelModel):
    title: constr(strip_whitespace=True, min_length=1)
    content: constr(strip_whitespace=True, min_length=1)
    published: bool = False

    model_config = ConfigDict(extra="ignore")


class UpdatePost(CamelModel):
    title: constr(strip_whitespace=True, min_length=1) | None = None
    content: constr(strip_whitespace=True, min_length=1) | None = None
    published: bool | None = None

    model_config = ConfigDict(extra="ignore")
