"""
Procurement data models
Need expressions, purchase orders, receptions and expression discussions.

Data models only: lifecycle and ledger rules live in app/buisness/procurement/.
"""

from app.data.procurement.need_expression import NeedExpression, NeedLine
from app.data.procurement.purchase_order import PurchaseOrder, OrderLine
from app.data.procurement.reception import Reception, ReceptionLine
from app.data.procurement.discussion import Discussion

__all__ = [
    'NeedExpression',
    'NeedLine',
    'PurchaseOrder',
    'OrderLine',
    'Reception',
    'ReceptionLine',
    'Discussion',
]
