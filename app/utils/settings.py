# app/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./shop.db")
DB_CONNECT_ATTEMPTS = int(os.getenv("DB_CONNECT_ATTEMPTS", 5))

# signing key has no default; create_app refuses to start without it
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
JWT_KEY_ID = os.getenv("JWT_KEY_ID", "primary")
# "kid:secret,kid:secret" - still accepted for verification after a rotation
JWT_RETIRED_KEYS = os.getenv("JWT_RETIRED_KEYS", "")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")

CART_TTL_SECONDS = int(os.getenv("CART_TTL_SECONDS", 7 * 24 * 60 * 60))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
