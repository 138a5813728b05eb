"""Authentication service: salted password hashing, tokens and user lookups."""

import base64
import hashlib
import hmac
import logging
import secrets
import string

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.errors import ConflictError, InvalidCredentialsError, ValidationError
from src.models.user import User

logger = logging.getLogger(__name__)

TOKEN_ALPHABET = string.ascii_letters + string.digits
TOKEN_LENGTH = 16


def generate_token(length: int = TOKEN_LENGTH) -> str:
    """Generate a random URL-safe string, used for session tokens and salts."""
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def hash_password(password: str, salt: str) -> str:
    """Return the base64 SHA-256 digest of ``password + salt``."""
    digest = hashlib.sha256(f"{password}{salt}".encode()).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_password(password: str, salt: str, expected_hash: str) -> bool:
    """Check a plaintext password against a stored hash/salt pair."""
    return hmac.compare_digest(hash_password(password, salt), expected_hash)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def get_user_by_token(db: Session, token: str) -> User | None:
    """Get a user by session token."""
    return db.query(User).filter(User.token == token).first()


def create_user(
    db: Session,
    email: str,
    password: str,
    username: str | None,
    newsletter: bool = False,
) -> User:
    """Create a new user with a fresh salt and session token.

    The unique index on email is the final arbiter: a concurrent signup that
    slips past the caller's pre-check surfaces as a ConflictError here.
    """
    if not username:
        raise ValidationError("Username is mandatory.")

    salt = generate_token()
    user = User(
        email=email,
        username=username,
        avatar={},
        newsletter=newsletter,
        token=generate_token(),
        hash=hash_password(password, salt),
        salt=salt,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(f"User {email} already exist") from e
    db.refresh(user)
    logger.info(f"Created user {user.id} ({email})")
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.salt, user.hash):
        logger.warning(f"Failed login attempt for {email}")
        raise InvalidCredentialsError("Invalid email or password.")
    return user
