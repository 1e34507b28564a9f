# SQLAlchemy models
from .base import Base
from .command import Command

__all__ = ["Base", "Command"]
