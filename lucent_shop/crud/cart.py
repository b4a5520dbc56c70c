# lucent_shop/crud/cart.py
from sqlalchemy.orm import Session
from lucent_shop.models.cart import CartItem


def get_cart_items(db: Session, user_id: int) -> list[CartItem]:
    """All cart rows of the user, newest first."""
    return db.query(CartItem).filter(CartItem.user_id == user_id).order_by(
        CartItem.created_at.desc(), CartItem.id.desc()
    ).all()

def get_cart_item(db: Session, user_id: int, item_id: int) -> CartItem | None:
    """Finds a cart row only if it belongs to the user."""
    return db.query(CartItem).filter_by(id=item_id, user_id=user_id).first()

def get_cart_item_by_product(db: Session, user_id: int, product_id: int) -> CartItem | None:
    return db.query(CartItem).filter_by(user_id=user_id, product_id=product_id).first()

def count_cart_items(db: Session, user_id: int) -> int:
    return db.query(CartItem).filter(CartItem.user_id == user_id).count()

def add_or_update_cart_item(db: Session, user_id: int, product_id: int, quantity: int) -> CartItem:
    """
    Creates the row or overwrites its quantity.
    The caller is responsible for merging and validation.
    """
    item = get_cart_item_by_product(db, user_id, product_id)
    if item:
        item.quantity = quantity
    else:
        item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
        db.add(item)
    db.commit()
    db.refresh(item)
    return item

def set_quantity(db: Session, item: CartItem, quantity: int) -> CartItem:
    item.quantity = quantity
    db.commit()
    db.refresh(item)
    return item

def remove_cart_item(db: Session, user_id: int, item_id: int) -> bool:
    item = get_cart_item(db, user_id, item_id)
    if item:
        db.delete(item)
        db.commit()
        return True
    return False

def clear_cart(db: Session, user_id: int, commit: bool = True):
    """Empties the cart. With commit=False the delete joins the caller's transaction."""
    db.query(CartItem).filter_by(user_id=user_id).delete(synchronize_session=False)
    if commit:
        db.commit()
