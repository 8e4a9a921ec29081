# app/api/routers/orders.py
from fastapi import APIRouter
from sqlalchemy.orm import Session

from app.api.deps import CurrentUser
from app.data.database import DbSession
from app.domain.schemas import OrderCreateIn, OrderListResponse, OrderResponse
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=OrderResponse, status_code=201)
def create_order(payload: OrderCreateIn, db: DbSession, identity: CurrentUser):
    """
    Creates an order from a cart that has already been checked out.
    The notification is sent asynchronously.
    """
    order = get_service(db).create_order_from_cart(payload.cart_id, identity.user_id)
    return OrderResponse(message="Order created", data=order)


@router.get("", response_model=OrderListResponse)
def list_orders(db: DbSession, identity: CurrentUser):
    return OrderListResponse(data=get_service(db).list_orders(identity.user_id))


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, db: DbSession, identity: CurrentUser):
    return OrderResponse(data=get_service(db).get_order(order_id, identity.user_id))
