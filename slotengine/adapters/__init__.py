"""
Adapters layer - External data sources.
"""

from .json_repository import JsonScheduleRepository

__all__ = ["JsonScheduleRepository"]
