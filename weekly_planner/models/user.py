"""User model for SQLModel."""
import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from weekly_planner.utils.clock import timestamp_column, utc_now


class User(SQLModel, table=True):
    """User entity for authentication."""

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True,
        index=True
    )
    email: str = Field(unique=True, index=True, max_length=255)
    username: str = Field(max_length=255)
    password_hash: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
    updated_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
