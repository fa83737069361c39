"""Weekly task planner: week store API and async sync client."""

__version__ = "1.0.0"
