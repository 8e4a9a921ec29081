# app/api/routers/auth.py
from fastapi import APIRouter, Depends

from app.api.deps import CurrentUser, get_auth_service
from app.domain.schemas import LoginIn, SignupIn, TokenOut, UserResponse
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=TokenOut, status_code=201)
def signup(payload: SignupIn, auth: AuthService = Depends(get_auth_service)):
    token = auth.signup(payload)
    return TokenOut(token=token, message="User created successfully")


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, auth: AuthService = Depends(get_auth_service)):
    token = auth.login(payload)
    return TokenOut(token=token, message="Login successful")


@router.get("/me", response_model=UserResponse)
def me(identity: CurrentUser, auth: AuthService = Depends(get_auth_service)):
    user = auth.get_user(identity.user_id)
    return UserResponse(
        data={
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "created_at": user.created_at,
        }
    )
