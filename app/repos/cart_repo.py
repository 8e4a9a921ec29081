# app/repos/cart_repo.py
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel, CART_ACTIVE, CART_ABANDONED


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def get_active_cart_by_owner(self, owner_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(
                CartModel.owner_id == owner_id,
                CartModel.status == CART_ACTIVE,
            )
        ).scalar_one_or_none()

    def get_active_cart_by_session(self, session_id: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(
                CartModel.session_id == session_id,
                CartModel.status == CART_ACTIVE,
            )
        ).scalar_one_or_none()

    def add_cart(self, cart: CartModel) -> None:
        self.db.add(cart)

    def update_cart_version(self, cart_id: int, old_version: int, new_data: Dict[str, Any]) -> int:
        # UPDATE carts SET ... WHERE id = :id AND version = :old_version
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_cart_version(self, cart: CartModel, old_version: int) -> int:
        # claim the row by bumping its version first so a concurrent writer loses
        rowcount = self.update_cart_version(cart.id, old_version, {"version": old_version + 1})
        if rowcount:
            self.db.delete(cart)
        return rowcount

    def abandon_carts_older_than(self, cutoff: datetime) -> int:
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.status == CART_ACTIVE, CartModel.updated_at < cutoff)
            .values(status=CART_ABANDONED, version=CartModel.version + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
