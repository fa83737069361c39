"""Services package for the weekly planner."""

from .user_service import UserService
from .week_service import WeekService

__all__ = ["UserService", "WeekService"]
