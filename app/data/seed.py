# app/data/seed.py
from decimal import Decimal

from app.data.database import Base, SessionLocal, engine
from app.data.models.product import ProductModel
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_PRODUCTS = [
    {
        "name": "Pen",
        "description": "Blue ballpoint pen",
        "price": Decimal("2.00"),
        "category": "stationery",
        "stock": 500,
        "images": ["https://cdn.example.com/products/pen.jpg"],
    },
    {
        "name": "Notebook",
        "description": "A5 dotted notebook, 120 pages",
        "price": Decimal("6.50"),
        "category": "stationery",
        "stock": 120,
        "images": ["https://cdn.example.com/products/notebook.jpg"],
    },
    {
        "name": "Desk Lamp",
        "description": "LED lamp with adjustable arm",
        "price": Decimal("34.90"),
        "category": "home",
        "stock": 25,
        "images": [
            "https://cdn.example.com/products/lamp-1.jpg",
            "https://cdn.example.com/products/lamp-2.jpg",
        ],
    },
    {
        "name": "Mug",
        "description": "Ceramic mug, 350 ml",
        "price": Decimal("9.00"),
        "category": "home",
        "stock": 0,
        "images": [],
    },
]


def seed(db=None) -> int:
    """Inserts the demo catalogue if the products table is empty. Returns rows added."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        repo = ProductRepo(db)
        # not forcing: only seed if empty
        if repo.count():
            return 0
        repo.add_products(ProductModel(**p) for p in DEMO_PRODUCTS)
        logger.info(f"Seeded {len(DEMO_PRODUCTS)} products")
        return len(DEMO_PRODUCTS)
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    seed()
