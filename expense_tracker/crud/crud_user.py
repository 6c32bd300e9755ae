from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional
from datetime import datetime
import bcrypt

from expense_tracker.db.core import UserDB, NotFoundError
from expense_tracker.models.user import MAX_PASSWORD_BYTES, UserCreate, UserUpdate, PasswordChange
from expense_tracker.logging_config import get_logger

logger = get_logger(__name__)


# ===== PASSWORD HASHING UTILITIES =====

def hash_password(password: str) -> str:
    """Hash a password with bcrypt"""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash; over-long input never matches"""
    if len(plain_password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


# ===== DATABASE OPERATIONS =====

def email_exists(db: Session, email: str, exclude_user_id: Optional[int] = None) -> bool:
    query = db.query(UserDB).filter(UserDB.email == email.lower())
    if exclude_user_id is not None:
        query = query.filter(UserDB.id != exclude_user_id)
    return query.first() is not None


def create_db_user(db: Session, user_data: UserCreate) -> UserDB:
    """Create a new user in the database"""

    if email_exists(db, user_data.email):
        raise ValueError("Email already exists")

    db_user = UserDB(
        name=user_data.name,
        email=user_data.email,
        password_hash=hash_password(user_data.password),
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )

    try:
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
    except IntegrityError:
        db.rollback()
        raise ValueError("User creation failed due to database constraint")

    logger.info(f"Registered user {db_user.id}")
    return db_user


def read_db_user(db: Session, user_id: Optional[int] = None, email: Optional[str] = None) -> Optional[UserDB]:
    """Read a user from the database by id or email"""

    query = db.query(UserDB)

    if user_id:
        return query.filter(UserDB.id == user_id).first()
    elif email:
        return query.filter(UserDB.email == email.lower()).first()
    else:
        raise ValueError("Must provide at least one identifier (user_id or email)")


def update_db_user(db: Session, user_id: int, user_updates: UserUpdate) -> UserDB:
    """Update an existing user's profile"""

    db_user = db.query(UserDB).filter(UserDB.id == user_id).first()
    if not db_user:
        raise NotFoundError(f"User with id {user_id} not found")

    if user_updates.email and user_updates.email != db_user.email:
        if email_exists(db, user_updates.email, exclude_user_id=user_id):
            raise ValueError("Email already exists")

    update_data = user_updates.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(db_user, field, value)

    db_user.updated_at = datetime.utcnow()

    try:
        db.commit()
        db.refresh(db_user)
        return db_user
    except IntegrityError:
        db.rollback()
        raise ValueError("User update failed due to database constraint")


def authenticate_user(db: Session, email: str, password: str) -> Optional[UserDB]:
    """Authenticate a user by email and password"""

    user = read_db_user(db, email=email)
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


def change_user_password(db: Session, user_id: int, password_change: PasswordChange) -> UserDB:
    """Change a user's password"""

    db_user = db.query(UserDB).filter(UserDB.id == user_id).first()
    if not db_user:
        raise NotFoundError(f"User with id {user_id} not found")

    if not verify_password(password_change.current_password, db_user.password_hash):
        raise ValueError("Current password is incorrect")

    db_user.password_hash = hash_password(password_change.new_password)
    db_user.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(db_user)
    logger.info(f"Password changed for user {user_id}")
    return db_user
