"""
Core models package for the procurement system
Users, catalog reference data and number sequences shared by procurement records
"""

from .user_info.user import User

__all__ = [
    'User',
]
