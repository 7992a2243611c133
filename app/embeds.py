import html
from typing import Literal

EmbedKind = Literal["image", "video", "audio"]

EMBED_TEMPLATES: dict[str, str] = {
    "image": '<img src="{src}">',
    "video": '<video src="{src}" controls></video>',
    "audio": '<audio src="{src}" controls></audio>',
}


def embed_kind(content_type: str) -> EmbedKind:
    if content_type.startswith("image"):
        return "image"
    if content_type.startswith("video"):
        return "video"
    return "audio"


def _outside_tag(content: str, index: int) -> int:
    # an offset between "<" and ">" is moved right after the tag
    if content.rfind("<", 0, index) > content.rfind(">", 0, index):
        closing = content.find(">", index)
        return len(content) if closing == -1 else closing + 1
    return index


def insert_embed(
    content: str, kind: EmbedKind, url: str, index: int | None = None
) -> str:
    node = EMBED_TEMPLATES[kind].format(src=html.escape(url, quote=True))
    if index is None or index >= len(content):
        return content + node
    index = _outside_tag(content, max(0, index))
    return content[:index] + node + content[index:]
