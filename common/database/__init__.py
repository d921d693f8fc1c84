"""
Database module - Motor/Beanie connection handling.
"""

from common.database.mongodb import MongoDB

__all__ = ["MongoDB"]
