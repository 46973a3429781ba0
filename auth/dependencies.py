"""
FastAPI dependencies for authentication.

Components are built once in ``create_app`` and kept on ``app.state``;
these dependencies hand them to route handlers and gate the
role-specific endpoints on the bearer token.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.uploads import UploadStorage
from auth.tokens import InvalidTokenError, TokenClaims, TokenService
from config.settings import Settings
from database.account_store import AccountStore
from utils.errors import ForbiddenError, UnauthorizedError
from utils.schemas import Role

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_account_store(request: Request) -> AccountStore:
    return request.app.state.account_store


def get_upload_storage(request: Request) -> UploadStorage:
    return request.app.state.upload_storage


async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    Extract and verify the Bearer token, returning its claims.

    A missing token is a 401; a token that fails verification is a 403.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Access token required")
    try:
        return tokens.verify(credentials.credentials)
    except InvalidTokenError as exc:
        logger.debug("Rejected token: %s", exc)
        raise UnauthorizedError("Invalid or expired token", status_code=403)


def require_role(role: Role) -> Callable[..., Awaitable[TokenClaims]]:
    """Dependency factory: the token's role must equal ``role``."""

    async def _require_role(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
        if claims.role is not role:
            raise ForbiddenError(
                f"Access denied. {role.value.capitalize()} account required."
            )
        return claims

    return _require_role
