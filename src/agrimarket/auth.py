"""Bearer-token authentication for the HTTP and WebSocket APIs.

Tokens are issued elsewhere; this module only verifies them. Customer
tokens carry the user id in ``_id``; seller and administrator tokens carry
it in ``adminId``. Administrator routes additionally require a truthy
``isAdmin`` claim.
"""

from dataclasses import dataclass, field

import jwt
import structlog
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from agrimarket.settings import MarketSettings

logger = structlog.get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class InvalidToken(Exception):
    """The token could not be decoded, has expired or names no user."""


@dataclass(frozen=True)
class CurrentUser:
    user_id: str
    is_admin: bool = False
    claims: dict = field(default_factory=dict)


def decode_token(token: str, settings: MarketSettings) -> CurrentUser:
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as exc:
        raise InvalidToken(str(exc)) from exc

    user_id = claims.get("_id") or claims.get("adminId")
    if not user_id:
        raise InvalidToken("Token does not identify a user")
    return CurrentUser(user_id=str(user_id), is_admin=bool(claims.get("isAdmin")), claims=claims)


def get_settings(request: Request) -> MarketSettings:
    return request.app.state.settings


def current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: MarketSettings = Depends(get_settings),
) -> CurrentUser:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Access denied. No token provided")
    try:
        return decode_token(credentials.credentials, settings)
    except InvalidToken as exc:
        logger.info("token_rejected", reason=str(exc))
        raise HTTPException(status_code=403, detail="Invalid or expired token") from exc


def admin_user(user: CurrentUser = Depends(current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Access denied. Admin privileges required")
    return user
