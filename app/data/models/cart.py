#app/data/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, Index, text
from sqlalchemy.orm import relationship

from app.data.database import Base, utcnow

CART_ACTIVE = "active"
CART_ORDERED = "ordered"
CART_ABANDONED = "abandoned"

_ACTIVE_ONLY = text("status = 'active'")


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    # guest carts have no owner, user carts have no session
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    session_id = Column(String(128), nullable=True)

    status = Column(String(20), nullable=False, default=CART_ACTIVE)
    total_price = Column(Numeric(12, 2), nullable=False, default=0)
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.position",
    )

    # at most one active cart per owner and per session
    __table_args__ = (
        Index(
            "uq_carts_active_owner",
            "owner_id",
            unique=True,
            sqlite_where=_ACTIVE_ONLY,
            postgresql_where=_ACTIVE_ONLY,
        ),
        Index(
            "uq_carts_active_session",
            "session_id",
            unique=True,
            sqlite_where=_ACTIVE_ONLY,
            postgresql_where=_ACTIVE_ONLY,
        ),
    )
