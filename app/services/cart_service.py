# app/services/cart_service.py
from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.database import utcnow
from app.data.models.cart import CartModel, CART_ACTIVE, CART_ORDERED
from app.data.models.cart_item import CartItemModel
from app.domain.errors import BadRequest, CartConflict, NotFound
from app.repos.cart_repo import CartRepo
from app.utils.settings import CART_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


CENT = Decimal("0.01")


def to_cents(amount: Decimal) -> Decimal:
    # same scale as the Numeric(12, 2) price columns
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_total(items: Iterable[CartItemModel]) -> Decimal:
    return sum((Decimal(i.price) * i.quantity for i in items), Decimal("0.00"))


def empty_cart_view() -> Dict[str, Any]:
    return {"items": [], "total_price": Decimal("0.00")}


def serialize_cart(cart: CartModel) -> Dict[str, Any]:
    return {
        "id": cart.id,
        "user": cart.owner_id,
        "session_id": cart.session_id,
        "items": [
            {
                "name": i.name,
                "price": i.price,
                "image": i.image,
                "quantity": i.quantity,
            }
            for i in cart.items
        ],
        "total_price": cart.total_price,
        "status": cart.status,
        "version": cart.version,
        "created_at": cart.created_at,
        "updated_at": cart.updated_at,
    }


def _find_line(cart: CartModel, name: str) -> CartItemModel | None:
    return next((i for i in cart.items if i.name == name), None)


def _next_position(cart: CartModel) -> int:
    return max((i.position for i in cart.items), default=-1) + 1


class CartService:
    """
    Use cases for the cart domain.

    A cart is addressed by owner (user id) or, for guests, by session id, and
    only the single active cart for that key is ever read or changed. Every
    command recomputes total_price and writes the cart row conditionally on
    the version it read; a concurrent change makes the write match nothing,
    the transaction is rolled back and CartConflict is raised.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def get_cart(self, owner_id: Optional[int], session_id: Optional[str]) -> Dict[str, Any]:
        cart = self._find_active(owner_id, session_id)
        if not cart:
            return empty_cart_view()
        return serialize_cart(cart)

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_item(
        self,
        owner_id: Optional[int],
        session_id: Optional[str],
        name: Optional[str],
        price: Optional[Decimal],
        image: Optional[str] = None,
        quantity: int = 1,
    ) -> Dict[str, Any]:
        if not name or price is None:
            raise BadRequest("Name and price are required")
        if price < 0:
            raise BadRequest("Price must not be negative")
        if quantity is None or quantity < 1:
            raise BadRequest("Quantity must be at least 1")
        price = to_cents(price)

        cart = self._find_active(owner_id, session_id)
        if not cart:
            cart = CartModel(
                owner_id=owner_id,
                session_id=None if owner_id is not None else session_id,
                status=CART_ACTIVE,
                version=1,
            )

        existing = _find_line(cart, name)
        if existing:
            logger.info(
                f"Item {name!r} already in cart {cart.id}, quantity "
                f"{existing.quantity} -> {existing.quantity + quantity}"
            )
            existing.quantity += quantity
        else:
            cart.items.append(
                CartItemModel(
                    name=name,
                    price=price,
                    image=image,
                    quantity=quantity,
                    position=_next_position(cart),
                )
            )

        self._save(cart)
        return serialize_cart(cart)

    def update_quantity(
        self,
        owner_id: Optional[int],
        session_id: Optional[str],
        name: Optional[str],
        quantity: Optional[int],
    ) -> Dict[str, Any]:
        if quantity is None or quantity < 1:
            raise BadRequest("Quantity must be at least 1")

        cart = self._require_active(owner_id, session_id)

        item = _find_line(cart, name)
        if not item:
            raise NotFound("Item not found in cart")

        item.quantity = quantity
        self._save(cart)
        return serialize_cart(cart)

    def remove_item(self, owner_id: Optional[int], session_id: Optional[str], name: Optional[str]) -> Dict[str, Any]:
        cart = self._require_active(owner_id, session_id)

        matching = [i for i in cart.items if i.name == name]
        if not matching:
            return serialize_cart(cart)

        for item in matching:
            cart.items.remove(item)

        self._save(cart)
        return serialize_cart(cart)

    def clear(self, owner_id: Optional[int], session_id: Optional[str]) -> Dict[str, Any]:
        cart = self._require_active(owner_id, session_id)
        cart.items.clear()
        self._save(cart)
        return serialize_cart(cart)

    def merge(self, user_id: Optional[int], session_id: Optional[str]) -> Tuple[str, Dict[str, Any] | None]:
        """
        Folds the guest cart for session_id into the active cart of user_id.

        Without a user cart the guest cart is simply handed over to the user.
        Otherwise lines with the same name add up, new names are appended and
        the guest cart is deleted.
        """
        if user_id is None or not session_id:
            raise BadRequest("User and sessionId required")

        guest_cart = self.repo.get_active_cart_by_session(session_id)
        user_cart = self.repo.get_active_cart_by_owner(user_id)

        if not guest_cart:
            return "No guest cart", None

        if not user_cart:
            self._save(guest_cart, owner_id=user_id, session_id=None)
            logger.info(f"Guest cart {guest_cart.id} handed over to user {user_id}")
            return "Cart merged", serialize_cart(guest_cart)

        for guest_item in guest_cart.items:
            user_item = _find_line(user_cart, guest_item.name)
            if user_item:
                user_item.quantity += guest_item.quantity
            else:
                user_cart.items.append(
                    CartItemModel(
                        name=guest_item.name,
                        price=guest_item.price,
                        image=guest_item.image,
                        quantity=guest_item.quantity,
                        position=_next_position(user_cart),
                    )
                )

        guest_id = guest_cart.id
        if self.repo.delete_cart_version(guest_cart, guest_cart.version) == 0:
            self.repo.rollback()
            logger.warning(f"Guest cart {guest_id} changed during merge")
            raise CartConflict()

        self._save(user_cart)
        logger.info(f"Guest cart {guest_id} merged into cart {user_cart.id} of user {user_id}")
        return "Carts merged", serialize_cart(user_cart)

    def checkout(self, owner_id: Optional[int], session_id: Optional[str]) -> Dict[str, Any]:
        cart = self._require_active(owner_id, session_id)
        self._save(cart, status=CART_ORDERED)
        logger.info(f"Cart {cart.id} checked out")
        return serialize_cart(cart)

    def abandon_stale(self, now: datetime | None = None) -> int:
        """Marks active carts untouched for CART_TTL_SECONDS as abandoned."""
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(seconds=CART_TTL_SECONDS)
        count = self.repo.abandon_carts_older_than(cutoff)
        self.repo.commit()
        logger.info(f"Abandoned {count} carts idle since {cutoff.isoformat()}")
        return count

    # =====================================================
    # HELPERS
    # =====================================================
    def _find_active(self, owner_id: Optional[int], session_id: Optional[str]) -> CartModel | None:
        if owner_id is not None:
            return self.repo.get_active_cart_by_owner(owner_id)
        if session_id:
            return self.repo.get_active_cart_by_session(session_id)
        raise BadRequest("User or sessionId required")

    def _require_active(self, owner_id: Optional[int], session_id: Optional[str]) -> CartModel:
        cart = self._find_active(owner_id, session_id)
        if not cart:
            raise NotFound("Cart not found")
        return cart

    def _save(self, cart: CartModel, **changes: Any) -> None:
        total = compute_total(cart.items)

        if cart.id is None:
            cart.total_price = total
            self.repo.add_cart(cart)
            self._commit()
            logger.info(f"Created cart {cart.id}")
            return

        # Optimistic locking
        # UPDATE carts SET version = 2 WHERE id = 1 AND version = 1
        new_data = {
            **changes,
            "total_price": total,
            "version": cart.version + 1,
            "updated_at": utcnow(),
        }
        cart_id, old_version = cart.id, cart.version
        try:
            rowcount = self.repo.update_cart_version(cart_id, old_version, new_data)
        except IntegrityError:
            # another active cart now holds the same owner or session
            self.repo.rollback()
            raise CartConflict()

        if rowcount == 0:
            self.repo.rollback()
            logger.warning(f"Cart {cart_id} changed since version {old_version}")
            raise CartConflict()

        self._commit()

    def _commit(self) -> None:
        try:
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise CartConflict()
