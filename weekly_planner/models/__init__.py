from .user import User
from .week import Week

__all__ = ["User", "Week"]
