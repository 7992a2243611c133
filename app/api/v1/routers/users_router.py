from fastapi import APIRouter, Depends, status

from app import deps
from app.jwt_bearer import JWTBearer
from app.models.auth import JWTToken, User
from app.schemas.auth_schema import UpdateHandle
from app.services.auth_service import AuthService

jwt_bearer = JWTBearer()
router = APIRouter()


@router.get("/me", status_code=status.HTTP_200_OK, response_model_exclude_none=True)
async def get_me(
    token: JWTToken = Depends(jwt_bearer),
    auth_service: AuthService = Depends(deps.auth_service),
) -> User:
    return await auth_service.get_user(token.access_token)


@router.put("/me/handle", status_code=status.HTTP_204_NO_CONTENT)
async def update_handle(
    update_model: UpdateHandle,
    token: JWTToken = Depends(jwt_bearer),
    auth_service: AuthService = Depends(deps.auth_service),
):
    await auth_service.update_user(token.access_token, {"handle": update_model.handle})
