"""User service: credential storage and verification."""
from typing import Optional

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from weekly_planner.errors import AuthError, InvalidPayload
from weekly_planner.models.user import User
from weekly_planner.utils.logger import get_logger

logger = get_logger(__name__)


def hash_password(password: str) -> str:
    try:
        hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    except ValueError as e:
        # over 72 bytes
        raise InvalidPayload("Password is too long") from e
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


class UserService:
    """Service class for user accounts."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_email(self, email: str) -> Optional[User]:
        statement = select(User).where(User.email == email.lower())
        return self.session.exec(statement).first()

    def create(self, email: str, username: str, password: str) -> User:
        """Register a new user. Fails with InvalidPayload if the email is taken."""
        if self.get_by_email(email):
            raise InvalidPayload("User with this email already exists")

        user = User(
            email=email.lower(),
            username=username,
            password_hash=hash_password(password),
        )
        try:
            self.session.add(user)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise InvalidPayload("User with this email already exists") from e
        self.session.refresh(user)

        logger.info("User created", user_id=user.id)
        return user

    def authenticate(self, email: str, password: str) -> User:
        """Return the user for valid credentials, else raise AuthError."""
        user = self.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Sign in rejected")
            raise AuthError("Invalid email or password")
        return user
