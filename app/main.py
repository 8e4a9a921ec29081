# app/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from app.api.error_handlers import setup_error_handlers
from app.api.routers import auth, carts, health, orders, products
from app.data.database import Base, engine
from app.utils.logging import get_logger
from app.utils.retry import db_retry
from app.utils.security import TokenSigner

# every model has to be imported before create_all
from app.data import models  # noqa: F401

logger = get_logger(__name__)


@db_retry()
def init_db():
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database tables ready: {sorted(Base.metadata.tables)}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app(signer: TokenSigner | None = None) -> FastAPI:
    app = FastAPI(
        title="Shop Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    # signing keys are loaded once here and shared by every request
    app.state.token_signer = signer or TokenSigner.from_settings()

    setup_error_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8080)
