# app/api/routers/products.py
from fastapi import APIRouter
from sqlalchemy.orm import Session

from app.data.database import DbSession
from app.domain.schemas import ProductDetailOut, ProductListOut
from app.services.product_service import ProductService, serialize_product

router = APIRouter(tags=["products"])


def get_service(db: Session):
    return ProductService(db)


@router.get("/products", response_model=ProductListOut)
def list_products(db: DbSession):
    return {"products": [serialize_product(p) for p in get_service(db).list_products()]}


@router.get("/product/{product_id}", response_model=ProductDetailOut)
def get_product(product_id: str, db: DbSession):
    return {"product": serialize_product(get_service(db).get_product(product_id))}
