"""FastAPI dependency: get_current_user_id.

Usage in any protected router:
    @router.get("/protected")
    async def protected(user_id: Annotated[int, Depends(get_current_user_id)]):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.lt_common.errors import InvalidCredentialsError
from src.lt_gateway.auth.jwt_handler import decode_token

_bearer_scheme = HTTPBearer(auto_error=False)

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> int:
    """Validate the Bearer token and return the agent's user id from `sub`.

    Raises HTTP 401 if the token is missing, invalid, expired or has a
    non-numeric subject.
    """
    if credentials is None:
        raise _CREDENTIALS_EXCEPTION
    try:
        payload = decode_token(credentials.credentials)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    subject = payload.get("sub")
    if not subject or not str(subject).isdigit():
        raise _CREDENTIALS_EXCEPTION
    return int(subject)
