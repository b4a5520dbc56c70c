# lucent_shop/crud/product.py
from typing import Iterable, List

from sqlalchemy import update
from sqlalchemy.orm import Session

from lucent_shop.models.product import Product, ProductType


def get_product(db: Session, product_id: int) -> Product | None:
    return db.query(Product).filter(Product.id == product_id).first()

def get_product_by_slug(db: Session, slug: str) -> Product | None:
    return db.query(Product).filter(Product.slug == slug).first()

def get_products_by_ids(db: Session, product_ids: Iterable[int]) -> dict[int, Product]:
    """Fetches products in one query, keyed by id."""
    ids = list(set(product_ids))
    if not ids:
        return {}
    return {p.id: p for p in db.query(Product).filter(Product.id.in_(ids)).all()}

def _filtered(db: Session, active_only: bool, type: ProductType | None = None, search: str | None = None):
    query = db.query(Product)
    if active_only:
        query = query.filter(Product.is_active.is_(True))
    if type:
        query = query.filter(Product.type == type)
    if search:
        query = query.filter(Product.name.ilike(f"%{search}%"))
    return query

def get_products(
    db: Session,
    skip: int = 0,
    limit: int = 20,
    active_only: bool = True,
    type: ProductType | None = None,
    search: str | None = None,
) -> List[Product]:
    return _filtered(db, active_only, type, search).order_by(
        Product.created_at.desc(), Product.id.desc()
    ).offset(skip).limit(limit).all()

def count_products(db: Session, active_only: bool = True, type: ProductType | None = None, search: str | None = None) -> int:
    return _filtered(db, active_only, type, search).count()

def create_product(db: Session, **fields) -> Product:
    product = Product(**fields)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product

def update_product(db: Session, product: Product, **fields) -> Product:
    for key, value in fields.items():
        setattr(product, key, value)
    db.commit()
    db.refresh(product)
    return product

# --- Stock ---

def decrement_stock(db: Session, product_id: int, quantity: int) -> bool:
    """
    Atomically takes `quantity` units if at least that many remain.
    Returns False when the guard fails; does not commit.
    """
    result = db.execute(
        update(Product)
        .where(Product.id == product_id, Product.stock.isnot(None), Product.stock >= quantity)
        .values(stock=Product.stock - quantity)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1

def increment_stock(db: Session, product_id: int, quantity: int) -> None:
    """Returns units to stock (cancellation). No-op for unlimited stock; does not commit."""
    db.execute(
        update(Product)
        .where(Product.id == product_id, Product.stock.isnot(None))
        .values(stock=Product.stock + quantity)
        .execution_options(synchronize_session=False)
    )
