"""Account registration, login and token issuance."""

import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sweetshop.core.config import Settings
from sweetshop.core.errors import AuthenticationError, ConflictError
from sweetshop.core.security import create_access_token, hash_password, verify_password
from sweetshop.models.user import ROLE_USER, User
from sweetshop.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserOut

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "Username or email already exists"
BAD_CREDENTIALS_MESSAGE = "Invalid email or password"


def find_existing_user(db: Session, username: str, email: str) -> User | None:
    """Return a user holding either the username or the email, if any."""
    return (
        db.query(User)
        .filter(or_(User.username == username, User.email == email))
        .first()
    )


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    role: str = ROLE_USER,
    bcrypt_rounds: int = 12,
) -> User:
    """
    Persist a new user with a hashed password.

    Raises ConflictError when the username or email is taken, whether caught by
    the lookup or by the unique indexes at commit time.
    """
    if find_existing_user(db, username, email) is not None:
        raise ConflictError(DUPLICATE_USER_MESSAGE)

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password, rounds=bcrypt_rounds),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(DUPLICATE_USER_MESSAGE) from e
    db.refresh(user)
    return user


def _auth_response(user: User, settings: Settings) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(user, settings),
        user=UserOut.model_validate(user),
    )


def register(db: Session, settings: Settings, body: RegisterRequest) -> AuthResponse:
    """Create a regular user account and return a session token for it."""
    user = create_user(
        db,
        username=body.username,
        email=str(body.email),
        password=body.password,
        role=ROLE_USER,
        bcrypt_rounds=settings.BCRYPT_ROUNDS,
    )
    logger.info("Registered user id=%s username=%s", user.id, user.username)
    return _auth_response(user, settings)


def login(db: Session, settings: Settings, body: LoginRequest) -> AuthResponse:
    """
    Verify email and password and return a session token.

    Unknown email and wrong password raise the same AuthenticationError so the
    response does not reveal which accounts exist.
    """
    user = db.query(User).filter(User.email == str(body.email)).first()
    if user is None or not verify_password(body.password, user.password_hash):
        logger.warning("Failed login for email=%s", body.email)
        raise AuthenticationError(BAD_CREDENTIALS_MESSAGE)
    return _auth_response(user, settings)
