from aws_lambda_powertools import Logger
from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from app import deps
from app.jwt_bearer import JWTBearer
from app.models.auth import JWTToken, Session, User
from app.schemas.auth_schema import EmailOnly, OAuthProvider, SignIn, SignUp
from app.services.auth_service import AuthService

logger = Logger(utc=True)

jwt_bearer = JWTBearer()
router = APIRouter()


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def sign_up(
    sign_up_model: SignUp, auth_service: AuthService = Depends(deps.auth_service)
) -> User:
    return await auth_service.sign_up(
        sign_up_model.email,
        sign_up_model.password,
        sign_up_model.first_name,
        sign_up_model.last_name,
    )


@router.post("/login", status_code=status.HTTP_200_OK)
async def login(
    sign_in_model: SignIn, auth_service: AuthService = Depends(deps.auth_service)
) -> Session:
    return await auth_service.sign_in_with_password(
        sign_in_model.email, sign_in_model.password
    )


@router.post("/magic-link", status_code=status.HTTP_202_ACCEPTED)
async def magic_link(
    email_model: EmailOnly, auth_service: AuthService = Depends(deps.auth_service)
):
    await auth_service.sign_in_with_otp(email_model.email)


@router.post("/password-reset", status_code=status.HTTP_202_ACCEPTED)
async def password_reset(
    email_model: EmailOnly, auth_service: AuthService = Depends(deps.auth_service)
):
    await auth_service.reset_password_for_email(email_model.email)


@router.get("/oauth/{provider}", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
def oauth(
    provider: OAuthProvider, auth_service: AuthService = Depends(deps.auth_service)
) -> RedirectResponse:
    return RedirectResponse(auth_service.get_oauth_url(provider))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    token: JWTToken = Depends(jwt_bearer),
    auth_service: AuthService = Depends(deps.auth_service),
):
    await auth_service.sign_out(token.access_token)
    logger.info(f"Signed out owner_id={token.owner_id}")
