#!/usr/bin/env python3
"""
Virtual Sequence Generator Base Class
Single-row counter tables issuing the human-readable numbers of expressions,
purchase orders and receptions
"""

from app import db
from sqlalchemy import text
import threading
from abc import ABC


class VirtualSequenceGenerator(ABC):
    """
    Base class for per-entity-type number counters

    Subclasses set ``sequence_name``; the counter lives in the table
    ``_sequence_<sequence_name>``. The counter row is incremented inside the
    caller's transaction: a rolled-back operation rolls its increment back
    too, so numbers are never issued twice.
    """

    sequence_name = None
    _lock = threading.Lock()

    @classmethod
    def get_sequence_table_name(cls):
        if not cls.sequence_name:
            raise NotImplementedError(f"{cls.__name__} must define sequence_name")
        return f"_sequence_{cls.sequence_name}"

    @classmethod
    def get_next_id(cls):
        """
        Increment the counter and return the new value
        Does not commit: the increment belongs to the caller's transaction
        """
        table = cls.get_sequence_table_name()
        with cls._lock:
            db.session.execute(text(f"UPDATE {table} SET current_value = current_value + 1 WHERE id = 1"))
            return db.session.execute(text(f"SELECT current_value FROM {table} WHERE id = 1")).scalar()

    @classmethod
    def create_sequence_if_not_exists(cls):
        """Create the counter table and its single row if missing"""
        table = cls.get_sequence_table_name()
        try:
            db.session.execute(text(f"""
                CREATE TABLE IF NOT EXISTS {table} (
                    id INTEGER PRIMARY KEY,
                    current_value INTEGER NOT NULL DEFAULT 0
                )
            """))
            if db.session.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar() == 0:
                db.session.execute(text(f"INSERT INTO {table} (id, current_value) VALUES (1, 0)"))
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    @classmethod
    def get_current_sequence_value(cls):
        """Last number issued (0 before the first)"""
        return db.session.execute(text(f"SELECT current_value FROM {cls.get_sequence_table_name()} WHERE id = 1")).scalar()

    @classmethod
    def reset(cls, value=0):
        """Set the counter back to ``value``. Does not commit."""
        with cls._lock:
            db.session.execute(
                text(f"UPDATE {cls.get_sequence_table_name()} SET current_value = :value WHERE id = 1"),
                {"value": value},
            )
