"""Task tracking REST API: users, tasks and comments."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
