from aws_lambda_powertools import Logger
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from app import deps
from app.api.v1.routers.upload_router import read_file
from app.jwt_bearer import JWTBearer
from app.models.auth import JWTToken
from app.models.response import Editor
from app.schemas.editor_schema import EditDraft, SavePost
from app.services.editor_session import EditorSessionRegistry
from app.services.upload_service import UploadService

MESSAGE_DRAFT_RESTORED = "Loaded unsaved draft from your last session."

logger = Logger(utc=True)

jwt_bearer = JWTBearer()
router = APIRouter()


@router.get("", status_code=status.HTTP_200_OK)
async def load(
    post_id: str | None = Query(None, alias="postId"),
    token: JWTToken = Depends(jwt_bearer),
    sessions: EditorSessionRegistry = Depends(deps.editor_sessions),
) -> Editor:
    session = sessions.get(token.owner_id)
    restored = await session.load(post_id)
    return Editor(
        state=session.state,
        restored=restored,
        message=MESSAGE_DRAFT_RESTORED if restored else None,
    )


@router.patch("", status_code=status.HTTP_200_OK)
async def edit(
    edit_model: EditDraft,
    token: JWTToken = Depends(jwt_bearer),
    sessions: EditorSessionRegistry = Depends(deps.editor_sessions),
) -> Editor:
    session = sessions.get(token.owner_id)
    state = await session.edit(
        title=edit_model.title,
        content=edit_model.content,
        published=edit_model.published,
    )
    return Editor(state=state)


@router.post("/save", status_code=status.HTTP_200_OK)
async def save(
    save_model: SavePost,
    token: JWTToken = Depends(jwt_bearer),
    sessions: EditorSessionRegistry = Depends(deps.editor_sessions),
) -> Editor:
    session = sessions.get(token.owner_id)
    post = await session.save(save_model.published)
    logger.info(f"Post saved from editor id={post.id}")
    return Editor(state=session.state)


@router.delete("/draft", status_code=status.HTTP_204_NO_CONTENT)
async def clear_draft(
    token: JWTToken = Depends(jwt_bearer),
    sessions: EditorSessionRegistry = Depends(deps.editor_sessions),
):
    await sessions.get(token.owner_id).clear_draft()


@router.post("/embeds", status_code=status.HTTP_200_OK)
async def add_embed(
    file: UploadFile | None = File(None),
    index: int | None = Form(None, ge=0),
    token: JWTToken = Depends(jwt_bearer),
    sessions: EditorSessionRegistry = Depends(deps.editor_sessions),
    upload_service: UploadService = Depends(deps.upload_service),
) -> Editor:
    data = await read_file(file)
    url = await upload_service.upload(file.filename, file.content_type, data)
    session = sessions.get(token.owner_id)
    state = await session.insert_embed(file.content_type, url, index)
    return Editor(state=state)
