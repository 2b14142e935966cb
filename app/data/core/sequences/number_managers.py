"""
Number managers for need expressions, purchase orders and receptions
"""

from app.data.core.virtual_sequence_generator import VirtualSequenceGenerator


class ExpressionNumberManager(VirtualSequenceGenerator):
    """Issues need expression numbers"""
    sequence_name = "expression_number"


class OrderNumberManager(VirtualSequenceGenerator):
    """
    Issues purchase order numbers
    A number is never reused, even for a cancelled order
    """
    sequence_name = "order_number"


class ReceptionNumberManager(VirtualSequenceGenerator):
    """Issues reception numbers"""
    sequence_name = "reception_number"
