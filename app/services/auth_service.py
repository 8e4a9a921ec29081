# app/services/auth_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.user import UserModel
from app.domain.errors import Conflict, Forbidden, NotFound, Unauthorized
from app.domain.schemas import LoginIn, SignupIn, TokenData
from app.repos.user_repo import UserRepo
from app.utils.logging import get_logger
from app.utils.security import InvalidToken, TokenSigner, get_password_hash, verify_password

logger = get_logger(__name__)


class AuthService:
    """
    Registration, login and bearer-token checks.
    The signer is created once at startup and handed in, never built here.
    """

    def __init__(self, db: Session, signer: TokenSigner):
        self.repo = UserRepo(db)
        self.signer = signer

    def signup(self, payload: SignupIn) -> str:
        email = payload.email.strip().lower()

        if self.repo.get_user_by_email(email):
            raise Conflict("User already exists")

        user = UserModel(
            name=payload.name.strip(),
            email=email,
            password_hash=get_password_hash(payload.password),
        )
        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            # lost a race with a concurrent signup for the same email
            self.repo.rollback()
            raise Conflict("User already exists")

        logger.info(f"Registered user {created.id}")
        return self.signer.sign(created.id)

    def login(self, payload: LoginIn) -> str:
        user = self.repo.get_user_by_email(payload.email)

        if not user or not verify_password(payload.password, user.password_hash):
            logger.info("Rejected login attempt")
            raise Unauthorized("Invalid Credentials")

        return self.signer.sign(user.id)

    def authenticate(self, token: str | None) -> TokenData:
        if not token:
            raise Unauthorized("Token not found. Unauthorized request")
        try:
            return TokenData(user_id=self.signer.verify(token))
        except InvalidToken:
            raise Forbidden("Invalid or expired token")

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFound("User not found")
        return user
