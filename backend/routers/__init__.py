"""FastAPI routers for modular endpoint organization."""

from . import ull

__all__ = [
    "ull",
]
