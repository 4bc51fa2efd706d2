# ruff: noqa: F403, F401
"""Schemas package initialization."""

# Import all schemas to ensure they're registered
from .base import *
from .batch import *
from .lifecycle import *
from .project import *
from .ranking import *
from .user import *
