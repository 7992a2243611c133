from fastapi import Request

from app.services.auth_service import AuthService
from app.services.editor_session import EditorSessionRegistry
from app.services.post_service import PostService
from app.services.upload_service import UploadService


def auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def editor_sessions(request: Request) -> EditorSessionRegistry:
    return request.app.state.editor_sessions


def post_service(request: Request) -> PostService:
    return request.app.state.post_service


def upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service
