# app/services/notification_service.py
from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Customer notifications, processed asynchronously by Celery.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int):
        send_order_notification_task.delay(user_id, order_id)


@celery_app.task(name="app.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int):
    # no mail/SMS provider is wired in; the task only records the event
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} received")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
