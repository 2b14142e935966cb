from decimal import Decimal

from app import db
from app.data.core.user_created_base import UserCreatedBase
from datetime import datetime


class PurchaseOrder(UserCreatedBase):
    """
    Priced, supplier-bound commitment derived from an approved need expression.

    ``status`` holds the last persisted fulfillment status; FulfillmentStats
    recomputes it from the lines on every read. ``version`` guards concurrent
    writers (optimistic locking through SQLAlchemy's version counter).
    """
    __tablename__ = 'purchase_orders'

    number = db.Column(db.Integer, unique=True, nullable=False)
    expression_id = db.Column(db.Integer, db.ForeignKey('need_expressions.id'), unique=True, nullable=False)

    # Supplier (name snapshotted at emission)
    supplier_id = db.Column(db.Integer, db.ForeignKey('suppliers.id'), nullable=True)
    supplier_name = db.Column(db.String(200), nullable=True)
    delivery_address = db.Column(db.Text, nullable=True)

    # Financial terms (percentages)
    tax_rate = db.Column(db.Numeric(5, 2), nullable=False, default=Decimal('0'))
    discount_rate = db.Column(db.Numeric(5, 2), nullable=False, default=Decimal('0'))

    observations = db.Column(db.Text, nullable=True)
    emitted_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Status
    status = db.Column(db.String(30), nullable=False, default='Pending')  # Pending/PartiallyDelivered/Delivered/Cancelled
    is_cancelled = db.Column(db.Boolean, nullable=False, default=False)
    cancellation_reason = db.Column(db.Text, nullable=True)
    cancelled_at = db.Column(db.DateTime, nullable=True)

    version = db.Column(db.Integer, nullable=False)
    __mapper_args__ = {'version_id_col': version}

    # Relationships
    expression = db.relationship('NeedExpression')
    supplier = db.relationship('Supplier')
    lines = db.relationship(
        'OrderLine',
        back_populates='purchase_order',
        cascade='all, delete-orphan',
        order_by='OrderLine.line_number',
    )
    receptions = db.relationship(
        'Reception',
        back_populates='purchase_order',
        order_by='Reception.number',
        lazy='dynamic',
    )

    def __repr__(self):
        return f'<PurchaseOrder {self.number}: expression {self.expression_id} [{self.status}]>'

    @property
    def reception_count(self):
        return self.receptions.count()


class OrderLine(UserCreatedBase):
    """
    A priced line of a purchase order.

    Material code/name/unit are copies taken at emission. ``quantity_received``
    is written only by the reception ledger.
    """
    __tablename__ = 'order_lines'
    __table_args__ = (
        db.CheckConstraint('quantity >= 0', name='ck_order_line_quantity'),
        db.CheckConstraint(
            'quantity_received >= 0 AND quantity_received <= quantity',
            name='ck_order_line_received_within_quantity',
        ),
    )

    order_id = db.Column(db.Integer, db.ForeignKey('purchase_orders.id'), nullable=False)
    line_number = db.Column(db.Integer, nullable=False)

    material_id = db.Column(db.Integer, db.ForeignKey('materials.id'), nullable=True)
    material_code = db.Column(db.String(100), nullable=False)
    material_name = db.Column(db.String(200), nullable=False)
    unit = db.Column(db.String(50), nullable=False)

    description = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(14, 4), nullable=False)
    quantity_received = db.Column(db.Integer, nullable=False, default=0)

    purchase_order = db.relationship('PurchaseOrder', back_populates='lines')
    reception_lines = db.relationship('ReceptionLine', back_populates='order_line', lazy='dynamic')

    def __repr__(self):
        return f'<OrderLine {self.id}: {self.material_code} x{self.quantity}>'

    @property
    def snapshot_identity(self):
        """Key used to match lines across a regeneration"""
        return (self.material_code, self.description.strip().lower())

    @property
    def quantity_remaining(self):
        return self.quantity - (self.quantity_received or 0)

    @property
    def line_total(self) -> Decimal:
        return Decimal(self.quantity) * Decimal(str(self.unit_price))
