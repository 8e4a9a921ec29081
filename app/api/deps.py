# app/api/deps.py
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.data.database import DbSession
from app.domain.errors import Forbidden, Unauthorized
from app.domain.schemas import TokenData
from app.services.auth_service import AuthService
from app.utils.security import TokenSigner

bearer_scheme = HTTPBearer(auto_error=False)

Credentials = Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]


def get_token_signer(request: Request) -> TokenSigner:
    return request.app.state.token_signer


def get_auth_service(db: DbSession, signer: TokenSigner = Depends(get_token_signer)) -> AuthService:
    return AuthService(db, signer)


def get_current_user(credentials: Credentials, auth: AuthService = Depends(get_auth_service)) -> TokenData:
    """Requires a valid bearer token: 401 when absent, 403 when invalid or expired."""
    return auth.authenticate(credentials.credentials if credentials else None)


def get_optional_user(credentials: Credentials, auth: AuthService = Depends(get_auth_service)) -> TokenData | None:
    """Like get_current_user, but guests without any token pass through as None."""
    if credentials is None:
        return None
    return auth.authenticate(credentials.credentials)


CurrentUser = Annotated[TokenData, Depends(get_current_user)]
OptionalUser = Annotated[Optional[TokenData], Depends(get_optional_user)]


def resolve_owner(requested_user: Optional[int], session_id: Optional[str], identity: Optional[TokenData]) -> Optional[int]:
    """
    Decides which user, if any, a cart request acts for.

    A client-supplied user id is only trusted when it matches the verified
    token. A request with a token but neither user nor session id acts for
    the token's user. Session-only requests stay guest requests.
    """
    if requested_user is not None:
        if identity is None:
            raise Unauthorized("Token not found. Unauthorized request")
        if identity.user_id != requested_user:
            raise Forbidden("Token does not belong to the requested user")
        return requested_user

    if identity is not None and not session_id:
        return identity.user_id

    return None
