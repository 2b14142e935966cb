from app import db
from app.data.core.user_created_base import UserCreatedBase


class NeedExpression(UserCreatedBase):
    """
    A procurement request raised by a division representative.

    The creator is the audit ``created_by_id``; ``created_at`` is the creation
    timestamp. Status values are defined in
    app.buisness.procurement.status_validator.ExpressionStatus.
    """
    __tablename__ = 'need_expressions'

    number = db.Column(db.Integer, unique=True, nullable=False)
    title = db.Column(db.String(255), nullable=False)

    division_id = db.Column(db.Integer, db.ForeignKey('divisions.id'), nullable=False)
    service_id = db.Column(db.Integer, db.ForeignKey('services.id'), nullable=True)

    status = db.Column(db.String(20), nullable=False, default='Draft')  # Draft/Pending/Approved/Rejected/InProgress

    # Decision
    decision_comment = db.Column(db.Text, nullable=True)
    decided_at = db.Column(db.DateTime, nullable=True)
    decided_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    # Relationships
    lines = db.relationship(
        'NeedLine',
        back_populates='expression',
        cascade='all, delete-orphan',
        order_by='NeedLine.id',
    )
    division = db.relationship('Division')
    service = db.relationship('Service')
    decided_by = db.relationship('User', foreign_keys=[decided_by_id])
    discussions = db.relationship(
        'Discussion',
        back_populates='expression',
        cascade='all, delete-orphan',
        order_by='Discussion.created_at',
        lazy='dynamic',
    )

    def __repr__(self):
        return f'<NeedExpression {self.number}: {self.title} [{self.status}]>'

    @property
    def creator_id(self):
        return self.created_by_id

    @property
    def total_quantity(self):
        return sum(line.quantity for line in self.lines)


class NeedLine(UserCreatedBase):
    """A requested item on a need expression"""
    __tablename__ = 'need_lines'
    __table_args__ = (
        db.CheckConstraint('quantity > 0', name='ck_need_line_quantity_positive'),
    )

    expression_id = db.Column(db.Integer, db.ForeignKey('need_expressions.id'), nullable=False)
    material_id = db.Column(db.Integer, db.ForeignKey('materials.id'), nullable=False)

    description = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    justification = db.Column(db.Text, nullable=True)

    expression = db.relationship('NeedExpression', back_populates='lines')
    material = db.relationship('Material')

    def __repr__(self):
        return f'<NeedLine {self.id}: Material {self.material_id}, Qty {self.quantity}>'
