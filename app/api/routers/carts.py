#app/api/routers/carts.py
from typing import Optional

from fastapi import APIRouter, Query
from sqlalchemy.orm import Session

from app.api.deps import CurrentUser, OptionalUser, resolve_owner
from app.data.database import DbSession
from app.domain.schemas import (
    AddItemIn,
    CartKeyIn,
    CartResponse,
    MergeIn,
    RemoveItemIn,
    UpdateItemIn,
)
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.post("/add", response_model=CartResponse, status_code=201)
def add_item(payload: AddItemIn, db: DbSession, identity: OptionalUser):
    owner = resolve_owner(payload.user, payload.session_id, identity)
    cart = get_service(db).add_item(
        owner_id=owner,
        session_id=payload.session_id,
        name=payload.name,
        price=payload.price,
        image=payload.image,
        quantity=payload.quantity,
    )
    return CartResponse(message="Item added", data=cart)


@router.get("", response_model=CartResponse, response_model_exclude_unset=True)
def get_cart(
    db: DbSession,
    identity: OptionalUser,
    user: Optional[int] = Query(None),
    session_id: Optional[str] = Query(None, alias="sessionId"),
):
    # without a cart, data is only {items: [], totalPrice: 0}
    owner = resolve_owner(user, session_id, identity)
    cart = get_service(db).get_cart(owner, session_id)
    return CartResponse(success=True, message=None, data=cart)


@router.put("/update", response_model=CartResponse)
def update_quantity(payload: UpdateItemIn, db: DbSession, identity: OptionalUser):
    owner = resolve_owner(payload.user, payload.session_id, identity)
    cart = get_service(db).update_quantity(owner, payload.session_id, payload.name, payload.quantity)
    return CartResponse(message="Quantity updated", data=cart)


@router.delete("/remove", response_model=CartResponse)
def remove_item(payload: RemoveItemIn, db: DbSession, identity: OptionalUser):
    owner = resolve_owner(payload.user, payload.session_id, identity)
    cart = get_service(db).remove_item(owner, payload.session_id, payload.name)
    return CartResponse(message="Item removed", data=cart)


@router.delete("/clear", response_model=CartResponse)
def clear_cart(payload: CartKeyIn, db: DbSession, identity: OptionalUser):
    owner = resolve_owner(payload.user, payload.session_id, identity)
    cart = get_service(db).clear(owner, payload.session_id)
    return CartResponse(message="Cart cleared", data=cart)


@router.post("/merge", response_model=CartResponse)
def merge_carts(payload: MergeIn, db: DbSession, identity: CurrentUser):
    """
    Called after login: moves the guest cart of sessionId into the user's cart.
    """
    user = resolve_owner(payload.user, None, identity)
    message, cart = get_service(db).merge(user, payload.session_id)
    return CartResponse(message=message, data=cart)


@router.post("/checkout", response_model=CartResponse)
def checkout(payload: CartKeyIn, db: DbSession, identity: OptionalUser):
    owner = resolve_owner(payload.user, payload.session_id, identity)
    cart = get_service(db).checkout(owner, payload.session_id)
    return CartResponse(message="Checkout complete", data=cart)
