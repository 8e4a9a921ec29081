# app/services/order_service.py
from typing import Any, Dict, List

from kombu.exceptions import OperationalError as BrokerError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.cart import CART_ORDERED
from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.domain.errors import BadRequest, Conflict, Forbidden, NotFound
from app.repos.cart_repo import CartRepo
from app.repos.order_repo import OrderRepo
from app.repos.product_repo import ProductRepo
from app.services.notification_service import NotificationService
from app.utils.logging import get_logger

logger = get_logger(__name__)


def serialize_order(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user": order.user_id,
        "cart_id": order.cart_id,
        "products": [
            {"product": i.product_id, "quantity": i.quantity, "price": i.price}
            for i in order.products
        ],
        "total_price": order.total_price,
        "status": order.status,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


class OrderService:
    """
    Order records, kept apart from CartService.
    Checkout only closes a cart; turning it into an order is this separate step.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.notification_service = notification_service or NotificationService()

    def create_order_from_cart(self, cart_id: int, user_id: int) -> Dict[str, Any]:
        """
        Use case: build an order from a checked-out cart.

        1. Cart must belong to the user and be in status "ordered"
        2. One order per cart
        3. Every line name must resolve to a catalogue product
        4. Prices and quantities are copied from the cart snapshot
        5. A notification is queued asynchronously
        """
        cart = self.carts.get_cart(cart_id)

        if not cart:
            raise NotFound("Cart not found")

        if cart.owner_id != user_id:
            raise Forbidden("Cart belongs to another user")

        if cart.status != CART_ORDERED:
            raise BadRequest("Cart must be checked out before an order is created")

        if not cart.items:
            raise BadRequest("Cart is empty")

        if self.repo.get_order_by_cart(cart_id):
            raise Conflict("Order already exists for this cart")

        lines = []
        for item in cart.items:
            product = self.products.get_product_by_name(item.name)
            if not product:
                raise BadRequest(f"No product named {item.name!r} in catalogue")
            lines.append(
                OrderItemModel(product_id=product.id, quantity=item.quantity, price=item.price)
            )

        order = OrderModel(
            user_id=user_id,
            cart_id=cart_id,
            status="pending",
            total_price=cart.total_price,
            products=lines,
        )

        try:
            created = self.repo.create_order(order)
        except IntegrityError:
            self.repo.rollback()
            raise Conflict("Order already exists for this cart")

        logger.info(f"Order {created.id} created from cart {cart_id}")

        try:
            self.notification_service.send_order_notification(user_id, created.id)
        except (BrokerError, ConnectionError):
            # order is already committed
            logger.exception(f"Could not queue notification for order {created.id}")

        return serialize_order(created)

    def get_order(self, order_id: int, user_id: int) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFound("Order not found")

        if order.user_id != user_id:
            raise Forbidden("Order belongs to another user")

        return serialize_order(order)

    def list_orders(self, user_id: int) -> List[Dict[str, Any]]:
        return [serialize_order(o) for o in self.repo.list_orders_for_user(user_id)]
