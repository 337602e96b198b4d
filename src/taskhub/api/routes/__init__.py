"""API route modules."""

from taskhub.api.routes import default, notes, tasks, users

__all__ = ["default", "notes", "tasks", "users"]
