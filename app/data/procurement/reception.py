from app import db
from app.data.core.user_created_base import UserCreatedBase
from datetime import date


class Reception(UserCreatedBase):
    """
    A delivery event recorded against a purchase order.

    Append-only: after creation only the confirmation flag may change, and
    only from False to True.
    """
    __tablename__ = 'receptions'

    number = db.Column(db.Integer, unique=True, nullable=False)
    order_id = db.Column(db.Integer, db.ForeignKey('purchase_orders.id'), nullable=False, index=True)

    reception_date = db.Column(db.Date, nullable=False, default=date.today)
    carrier = db.Column(db.String(200), nullable=True)
    observations = db.Column(db.Text, nullable=True)

    # Confirmation document (PV)
    confirmation_generated = db.Column(db.Boolean, nullable=False, default=False)
    confirmation_url = db.Column(db.String(500), nullable=True)
    confirmation_generated_at = db.Column(db.DateTime, nullable=True)

    purchase_order = db.relationship('PurchaseOrder', back_populates='receptions')
    lines = db.relationship(
        'ReceptionLine',
        back_populates='reception',
        cascade='all, delete-orphan',
        order_by='ReceptionLine.id',
    )

    def __repr__(self):
        return f'<Reception {self.number}: order {self.order_id}>'

    @property
    def total_received(self):
        return sum(line.quantity_received for line in self.lines)


class ReceptionLine(UserCreatedBase):
    """Quantity of one order line received in one delivery, with its conformity split"""
    __tablename__ = 'reception_lines'
    __table_args__ = (
        db.CheckConstraint(
            'quantity_accepted + quantity_rejected = quantity_received',
            name='ck_reception_line_conformity',
        ),
        db.CheckConstraint(
            'quantity_received > 0 AND quantity_accepted >= 0 AND quantity_rejected >= 0',
            name='ck_reception_line_quantities',
        ),
    )

    reception_id = db.Column(db.Integer, db.ForeignKey('receptions.id'), nullable=False)
    order_line_id = db.Column(db.Integer, db.ForeignKey('order_lines.id'), nullable=False, index=True)

    quantity_received = db.Column(db.Integer, nullable=False)
    quantity_accepted = db.Column(db.Integer, nullable=False)
    quantity_rejected = db.Column(db.Integer, nullable=False, default=0)
    observations = db.Column(db.Text, nullable=True)

    reception = db.relationship('Reception', back_populates='lines')
    order_line = db.relationship('OrderLine', back_populates='reception_lines')

    def __repr__(self):
        return f'<ReceptionLine {self.id}: line {self.order_line_id}, {self.quantity_received} received>'
