"""taskhub: REST backend for tasks, notes and users."""

from taskhub.config import VERSION as __version__

__all__ = ["__version__"]
