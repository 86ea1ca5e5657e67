import logging

from fastapi import APIRouter, Depends, Response, status

from mindjournal import schemas, security
from mindjournal.auth import TOKEN_COOKIE, get_current_user
from mindjournal.config import get_settings
from mindjournal.models.models import User
from mindjournal.services import auth_service

logger = logging.getLogger("routes.auth")
router = APIRouter(tags=["Auth"])


def _issue_token(user: User, response: Response) -> schemas.TokenResponse:
    settings = get_settings()
    token = security.create_access_token(user.id)
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=token,
        max_age=settings.jwt_expire_minutes * 60,
        httponly=True,
        secure=settings.env == "production",
        samesite="strict",
    )
    return schemas.TokenResponse(token=token, user=schemas.UserOut.model_validate(user))


@router.post("/register", response_model=schemas.TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(body: schemas.UserRegister, response: Response):
    user = await auth_service.register(body.username, body.email, body.password)
    return _issue_token(user, response)


@router.post("/login", response_model=schemas.TokenResponse)
async def login(body: schemas.UserLogin, response: Response):
    user = await auth_service.authenticate(body.email, body.password)
    return _issue_token(user, response)


@router.post("/logout", response_model=schemas.StatusResponse)
async def logout(response: Response, user: User = Depends(get_current_user)):
    response.delete_cookie(TOKEN_COOKIE)
    logger.info("User %s logged out", user.id)
    return schemas.StatusResponse()


@router.get("/me", response_model=schemas.MeResponse)
async def me(user: User = Depends(get_current_user)):
    return schemas.MeResponse(user=schemas.UserOut.model_validate(user))
