from aws_lambda_powertools import Logger
from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from app import deps
from app.jwt_bearer import JWTBearer
from app.models.auth import JWTToken
from app.models.response import Page
from app.models.response import Post as PostResponse
from app.schemas.post_schema import CreatePost, UpdatePost
from app.services.post_service import PostService

logger = Logger(utc=True)

jwt_bearer = JWTBearer()
router = APIRouter()


@router.post("")
def create_post(
    create_model: CreatePost,
    token: JWTToken = Depends(jwt_bearer),
    post_service: PostService = Depends(deps.post_service),
) -> Response:
    post = post_service.create_post(token.owner_id, create_model.model_dump())
    return Response(
        status_code=status.HTTP_201_CREATED,
        headers={"Location": f"/api/v1/posts/{post.id}"},
    )


@router.delete(
    "/{uuid}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_post(
    uuid: str,
    token: JWTToken = Depends(jwt_bearer),
    post_service: PostService = Depends(deps.post_service),
):
    post_service.delete_post(uuid, token.owner_id)


@router.get(
    "/{uuid}",
    status_code=status.HTTP_200_OK,
    response_model_exclude_none=True,
)
def get_post_by_uuid(
    uuid: str,
    token: JWTToken = Depends(jwt_bearer),
    post_service: PostService = Depends(deps.post_service),
) -> PostResponse:
    return post_service.get_post(uuid, token.owner_id)


@router.get(
    "",
    response_model=Page,
    status_code=status.HTTP_200_OK,
    response_model_exclude_none=True,
)
def get_posts(
    token: JWTToken = Depends(jwt_bearer),
    post_service: PostService = Depends(deps.post_service),
) -> Page:
    return post_service.get_posts(token.owner_id)


@router.put(
    "/{uuid}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def update_post(
    update_model: UpdatePost,
    uuid: str,
    token: JWTToken = Depends(jwt_bearer),
    post_service: PostService = Depends(deps.post_service),
):
    post_service.update_post(
        uuid, token.owner_id, update_model.model_dump(exclude_none=True)
    )
