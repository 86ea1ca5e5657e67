import logging

from mindjournal import crud, security
from mindjournal.errors import AuthenticationError, ConflictError
from mindjournal.models.models import User

logger = logging.getLogger("services.auth")

BAD_CREDENTIALS = "Incorrect email or password"


async def register(username: str, email: str, password: str) -> User:
    email = email.strip().lower()
    if await crud.get_user_by_email(email) or await crud.get_user_by_username(username):
        raise ConflictError("User with this email or username already exists")
    user = await crud.create_user(username, email, security.hash_password(password))
    logger.info("Registered user %s", user.id)
    return user


async def authenticate(email: str, password: str) -> User:
    user = await crud.get_user_by_email(email.strip().lower())
    # Unknown email and wrong password look the same to the caller
    if user is None or not security.verify_password(password, user.password_hash):
        logger.info("Failed login attempt")
        raise AuthenticationError(BAD_CREDENTIALS)
    return user


async def user_from_token(token: str) -> User:
    payload = security.decode_access_token(token)
    user = await crud.get_user(str(payload["sub"]))
    if user is None:
        raise AuthenticationError("The user belonging to this token no longer exists.")
    return user
