from app import db
from app.data.core.user_created_base import UserCreatedBase


class Discussion(UserCreatedBase):
    """A message posted on a need expression; the author is ``created_by_id``"""
    __tablename__ = 'discussions'

    expression_id = db.Column(db.Integer, db.ForeignKey('need_expressions.id'), nullable=False, index=True)
    message = db.Column(db.Text, nullable=False)

    expression = db.relationship('NeedExpression', back_populates='discussions')

    def __repr__(self):
        return f'<Discussion {self.id} on expression {self.expression_id}>'

    @property
    def author_id(self):
        return self.created_by_id
