from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from mindjournal.errors import AuthenticationError
from mindjournal.models.models import User
from mindjournal.services import auth_service
from mindjournal.services.journal_service import JournalService

TOKEN_COOKIE = "jwt"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_current_user(request: Request, token: Optional[str] = Depends(oauth2_scheme)) -> User:
    # Header first, then the cookie set at login
    token = token or request.cookies.get(TOKEN_COOKIE)
    if not token:
        raise AuthenticationError()
    return await auth_service.user_from_token(token)


def get_journal_service(request: Request) -> JournalService:
    return request.app.state.journal_service
