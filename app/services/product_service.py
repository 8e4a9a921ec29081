from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.data.models.product import ProductModel
from app.domain.errors import BadRequest, NotFound
from app.repos.product_repo import ProductRepo


def parse_product_id(raw: str) -> int:
    """Product ids are positive integers; anything else is structurally invalid."""
    raw = (raw or "").strip()
    # 18 digits always fit a signed 64-bit primary key
    if not (raw.isascii() and raw.isdigit()) or len(raw) > 18 or int(raw) <= 0:
        raise BadRequest("Invalid product ID")
    return int(raw)


def serialize_product(product: ProductModel) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "category": product.category,
        "stock": product.stock,
        "images": list(product.images or []),
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def list_products(self) -> List[ProductModel]:
        return self.repo.list_products()

    def get_product(self, raw_id: str) -> ProductModel:
        product = self.repo.get_product(parse_product_id(raw_id))
        if not product:
            raise NotFound("Product not found")
        return product
