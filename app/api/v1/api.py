from fastapi import APIRouter

from app.api.v1.routers import (
    auth_router,
    editor_router,
    posts_router,
    upload_router,
    users_router,
)

router = APIRouter(prefix="/api/v1")
router.include_router(auth_router.router, prefix="/auth", tags=["auth"])
router.include_router(editor_router.router, prefix="/editor", tags=["editor"])
router.include_router(posts_router.router, prefix="/posts", tags=["posts"])
router.include_router(upload_router.router, prefix="/upload", tags=["upload"])
router.include_router(users_router.router, prefix="/users", tags=["users"])
