"""
Sequence Number Managers
One counter per numbered procurement entity type
"""

from app.data.core.sequences.number_managers import (
    ExpressionNumberManager,
    OrderNumberManager,
    ReceptionNumberManager,
)

ALL_SEQUENCES = (ExpressionNumberManager, OrderNumberManager, ReceptionNumberManager)

__all__ = [
    'ExpressionNumberManager',
    'OrderNumberManager',
    'ReceptionNumberManager',
    'ALL_SEQUENCES',
]
