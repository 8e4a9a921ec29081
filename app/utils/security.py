# app/utils/security.py
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import jwt
from jwt import PyJWTError
from passlib.context import CryptContext

from app.utils import settings
from app.utils.logging import get_logger

logger = get_logger(__name__)

# Create the context once and reuse it
bcrypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """
    Hashes a plain-text password.
    """
    return bcrypt_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifies a plain-text password against a hashed password.
    """
    return bcrypt_context.verify(plain_password, hashed_password)


class InvalidToken(Exception):
    pass


class TokenSigner:
    """
    Signs and verifies access tokens.

    One key is active and signs every new token; its id goes into the JWT
    ``kid`` header. Retired keys only verify, so tokens issued before a
    rotation keep working until they expire.
    """

    def __init__(
        self,
        secret: str,
        key_id: str = "primary",
        retired_keys: Optional[Dict[str, str]] = None,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(hours=1),
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self.key_id = key_id
        self.algorithm = algorithm
        self.expires_in = expires_in
        self._keys = dict(retired_keys or {})
        self._keys[key_id] = secret

    @classmethod
    def from_settings(cls) -> "TokenSigner":
        if not settings.JWT_SECRET_KEY:
            raise RuntimeError("JWT_SECRET_KEY is not set")
        return cls(
            secret=settings.JWT_SECRET_KEY,
            key_id=settings.JWT_KEY_ID,
            retired_keys=parse_retired_keys(settings.JWT_RETIRED_KEYS),
            algorithm=settings.JWT_ALGORITHM,
            expires_in=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    def sign(self, user_id: int) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "userId": user_id,
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(
            claims,
            self._keys[self.key_id],
            algorithm=self.algorithm,
            headers={"kid": self.key_id},
        )

    def verify(self, token: str) -> int:
        """Returns the user id from a valid token, raises InvalidToken otherwise."""
        try:
            kid = jwt.get_unverified_header(token).get("kid")
            key = self._keys.get(kid)
            if key is None:
                raise InvalidToken(f"Unknown signing key {kid!r}")
            payload = jwt.decode(token, key, algorithms=[self.algorithm])
            return int(payload["sub"])
        except PyJWTError as e:
            logger.warning(f"JWT decode error: {e}")
            raise InvalidToken(str(e)) from e
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidToken("Token is missing a valid subject") from e


def parse_retired_keys(raw: str) -> Dict[str, str]:
    keys = {}
    for pair in filter(None, (p.strip() for p in raw.split(","))):
        kid, sep, secret = pair.partition(":")
        if not sep or not kid or not secret:
            raise ValueError(f"Malformed retired key entry {pair!r}, expected kid:secret")
        keys[kid] = secret
    return keys
