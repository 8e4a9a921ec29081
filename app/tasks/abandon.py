# app/tasks/abandon.py
from app.celery_worker import celery_app
from app.data.database import SessionLocal
from app.services.cart_service import CartService
from app.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="app.tasks.abandon.abandon_stale_carts_task")
def abandon_stale_carts_task():
    logger.info("Abandon stale carts task started")

    db = SessionLocal()
    try:
        return CartService(db).abandon_stale()
    finally:
        db.close()
