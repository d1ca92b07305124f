"""CLI command implementations."""

from .classify import classify, kinds
from .schedule import schedule

__all__ = ["classify", "kinds", "schedule"]
