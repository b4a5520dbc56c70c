# lucent_shop/crud/user.py
from sqlalchemy.orm import Session
from lucent_shop.models.user import User


def get_user_by_id(db: Session, user_id: int) -> User | None:
    """Fetches a user by primary key."""
    return db.query(User).filter(User.id == user_id).first()

def create_user(db: Session, email: str, name: str | None = None, phone: str | None = None) -> User:
    """Registers the shop profile for an account created by the auth provider."""
    db_user = User(email=email.lower(), name=name, phone=phone)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user
